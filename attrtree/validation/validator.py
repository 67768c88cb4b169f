"""
Validator Composition

Validators are pure descriptors: ``failures(root)`` yields every
ValidationFailure for a root value and never mutates it. Combinators only
aggregate and re-attribute failures:

- AllOf runs every child against the same root and collects everything
- ChainValidator runs a validator written for an inner value at an outer
  root, prefixing child failure paths with its own path
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, Iterable, Iterator, Optional, Sequence, Union

from ..core.path import ReadOnlyPath
from ..exceptions.errors import PathError, VariantMismatch
from .failures import ValidationFailure, ValidationResult

logger = logging.getLogger(__name__)

FailureFunction = Callable[[Any], Iterable[ValidationFailure]]


class Validator(ABC):
    """
    Validator (abstract base class)

    Subclasses implement ``failures``; ``validate`` wraps them in a
    ValidationResult.
    """

    @abstractmethod
    def failures(self, root: Any) -> Iterator[ValidationFailure]:
        """
        Yield every failure for ``root`` in declaration order

        Args:
            root: The value validated; never modified
        """
        pass

    def validate(self, root: Any) -> ValidationResult:
        return ValidationResult(list(self.failures(root)))


class AnyValidator(Validator):
    """
    Type-erased validator

    Wraps another validator or a function returning failures. The empty
    AnyValidator() always succeeds.
    """

    def __init__(self, wrapped: Union[Validator, FailureFunction, None] = None):
        if isinstance(wrapped, Validator):
            self._function: Optional[FailureFunction] = wrapped.failures
        else:
            self._function = wrapped

    def failures(self, root: Any) -> Iterator[ValidationFailure]:
        if self._function is None:
            return
        yield from self._function(root)


class AllOf(Validator):
    """Sequential AND of validators; every child runs, every failure is kept"""

    def __init__(self, validators: Sequence[Validator]):
        self.validators = tuple(validators)

    def failures(self, root: Any) -> Iterator[ValidationFailure]:
        for validator in self.validators:
            yield from validator.failures(root)


class ChainValidator(Validator):
    """
    Runs ``validator`` against the value at ``path``

    Child failure paths are relative to that value; they are reported with
    ``path`` prepended so they name the full route from the outer root.
    """

    def __init__(self, path: ReadOnlyPath, validator: Validator):
        self.path = path
        self.validator = validator

    def failures(self, root: Any) -> Iterator[ValidationFailure]:
        try:
            value = self.path.get(root)
        except VariantMismatch as e:
            yield ValidationFailure(self.path, e.message, code="variant_mismatch", cause=e)
            return
        except PathError as e:
            yield ValidationFailure(self.path, "Does not exist", code="missing", cause=e)
            return

        for failure in self.validator.failures(value):
            yield failure.with_prefix(self.path)


def _flatten(validators: Iterable[Any]) -> Iterator[Validator]:
    for validator in validators:
        if isinstance(validator, Validator):
            yield validator
        elif isinstance(validator, (list, tuple)):
            yield from _flatten(validator)
        else:
            yield AnyValidator(validator)


def all_of(*validators: Any) -> AllOf:
    """
    Combine validators into one

    Accepts validators, plain failure functions, and lists of either.
    """
    return AllOf(list(_flatten(validators)))


def chain(path: ReadOnlyPath, validator: Validator) -> ChainValidator:
    return ChainValidator(path, validator)
