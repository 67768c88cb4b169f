"""
Validator Factories

A ValidatorFactory records rules without a path and builds the validator
once the path is known:

    positive = ValidatorFactory.required().greater_than(0)
    validator = positive.make(ReadOnlyPath().attr("integer_value"))
"""

from typing import Any, Callable, Iterator, Tuple

from ..core.path import ReadOnlyPath
from ..exceptions.errors import PathError, VariantMismatch
from .failures import ValidationFailure
from .rules import PathValidator, ValidationPath
from .validator import Validator

# Rule methods a factory can record
RECORDABLE_RULES = frozenset(
    {
        "equals",
        "not_equals",
        "equals_true",
        "equals_false",
        "is_in",
        "is_in_path",
        "between",
        "less_than",
        "less_than_equal",
        "greater_than",
        "greater_than_equal",
        "empty",
        "not_empty",
        "length",
        "min_length",
        "max_length",
        "unique",
        "alpha",
        "alphadash",
        "alphafirst",
        "alphanumeric",
        "alphaunderscore",
        "alphaunderscorefirst",
        "numeric",
        "blacklist",
        "whitelist",
        "greylist",
        "push",
        "if_",
        "each",
    }
)

Call = Tuple[str, tuple, dict]


class _Presence:
    """
    Presence mode usable on the class or on a factory

    ``ValidatorFactory.optional()`` starts an empty recipe;
    ``factory.optional()`` keeps the rules already recorded.
    """

    def __init__(self, presence: bool, doc: str):
        self.presence = presence
        self.__doc__ = doc

    def __get__(self, instance: Any, owner: type) -> Callable[[], "ValidatorFactory"]:
        calls = () if instance is None else instance.calls

        def presence() -> "ValidatorFactory":
            return owner(self.presence, calls)

        presence.__doc__ = self.__doc__
        return presence


class ValidatorFactory:
    """Path-less rule recipe"""

    required = _Presence(True, 'Nil values fail with "Does not exist"')
    optional = _Presence(False, "Nil values pass without running any rule")

    def __init__(self, presence: bool = True, calls: Tuple[Call, ...] = ()):
        self.presence = presence
        self.calls = calls

    def __getattr__(self, name: str) -> Any:
        if name not in RECORDABLE_RULES:
            raise AttributeError(f"ValidatorFactory has no rule '{name}'")

        def record(*args: Any, **kwargs: Any) -> "ValidatorFactory":
            return ValidatorFactory(self.presence, self.calls + ((name, args, kwargs),))

        return record

    def make(self, path: ReadOnlyPath) -> "FactoryValidator":
        validator: PathValidator = ValidationPath(path)
        for name, args, kwargs in self.calls:
            validator = getattr(validator, name)(*args, **kwargs)
        return FactoryValidator(path, validator, self.presence)

    def __repr__(self) -> str:
        rules = ", ".join(name for name, _, _ in self.calls)
        mode = "required" if self.presence else "optional"
        return f"ValidatorFactory({mode}: {rules})"


class FactoryValidator(Validator):
    """
    Validator built by a ValidatorFactory

    A value of the wrong variant is a failure in both presence modes; only
    a missing route or a None value counts as nil.
    """

    def __init__(self, path: ReadOnlyPath, validator: PathValidator, presence: bool):
        self.path = path
        self.validator = validator
        self.presence = presence

    def failures(self, root: Any) -> Iterator[ValidationFailure]:
        try:
            value = self.path.get(root)
        except VariantMismatch as e:
            yield ValidationFailure(self.path, e.message, "variant_mismatch", dict(e.details), e)
            return
        except PathError as e:
            if self.presence:
                yield ValidationFailure(self.path, "Does not exist", "missing", cause=e)
            return

        if value is None:
            if self.presence:
                yield ValidationFailure(self.path, "Does not exist", "missing")
            return
        yield from self.validator.failures(root)
