"""
Annotation-driven model validation backed by pydantic.

Constraints live on the model's type annotations (``Annotated[int,
Field(ge=0, le=120)]``, pydantic validators, and so on). The validator
round-trips the model through a pydantic ``TypeAdapter`` and maps every
error location back to the FieldIdentity of the object that owns the
offending field.

Supported models: stdlib dataclasses, pydantic dataclasses and pydantic
BaseModel subclasses. Any other type has no annotations to check and always
validates clean.
"""

import dataclasses
import logging
from typing import Any, Dict, List, Optional, Tuple, Type

from pydantic import BaseModel, TypeAdapter, ValidationError
from pydantic.errors import PydanticSchemaGenerationError

from pyqt_formsession.core import FieldIdentity

logger = logging.getLogger(__name__)

# Field name used for errors raised by model-level validators (empty location)
MODEL_LEVEL_FIELD = "__model__"


class ValidatorCache:
    """
    Explicit cache of TypeAdapters per model type.

    Building a TypeAdapter compiles a validation schema, so sessions share a
    cache per model type. Pass one cache to several AnnotationValidators to
    share it; call ``clear()`` after redefining model classes (tests, hot
    reload).
    """

    def __init__(self):
        self._adapters: Dict[Type, Optional[TypeAdapter]] = {}

    def get(self, model_type: Type) -> Optional[TypeAdapter]:
        """Adapter for ``model_type``, or None when pydantic cannot build a schema."""
        if model_type not in self._adapters:
            self._adapters[model_type] = self._build(model_type)
        return self._adapters[model_type]

    @staticmethod
    def _build(model_type: Type) -> Optional[TypeAdapter]:
        is_model = isinstance(model_type, type) and issubclass(model_type, BaseModel)
        if not is_model and not dataclasses.is_dataclass(model_type):
            logger.debug(f"No annotation schema for {model_type.__name__}: not a dataclass or BaseModel")
            return None
        try:
            return TypeAdapter(model_type)
        except PydanticSchemaGenerationError as e:
            logger.warning(f"Cannot build validation schema for {model_type.__name__}: {e}")
            return None

    def clear(self) -> None:
        self._adapters.clear()

    def __len__(self) -> int:
        return len(self._adapters)


def _to_python(model: Any) -> Any:
    if isinstance(model, BaseModel):
        return model.model_dump()
    return dataclasses.asdict(model)


def _resolve_location(model: Any, loc: Tuple[Any, ...]) -> FieldIdentity:
    """Walk an error location down the model to the owning object."""
    if not loc or not isinstance(loc[0], str):
        return FieldIdentity(model, MODEL_LEVEL_FIELD)
    owner, name = model, loc[0]
    for part in loc[1:]:
        if not isinstance(part, str):
            # Sequence index: report against the sequence field itself
            break
        child = getattr(owner, name, None)
        if child is None or not hasattr(child, part):
            break
        owner, name = child, part
    return FieldIdentity(owner, name)


class AnnotationValidator:
    """Whole-model traversal that turns pydantic errors into a message mapping."""

    def __init__(self, cache: Optional[ValidatorCache] = None):
        self.cache = cache if cache is not None else ValidatorCache()

    def validate_model(self, model: Any) -> Dict[FieldIdentity, List[str]]:
        """
        Validate every annotated field of ``model``.

        Returns:
            Mapping of FieldIdentity to messages, in pydantic's error order.
            Empty when the model is valid.
        """
        adapter = self.cache.get(type(model))
        if adapter is None:
            return {}
        try:
            adapter.validate_python(_to_python(model))
        except ValidationError as e:
            errors: Dict[FieldIdentity, List[str]] = {}
            for error in e.errors():
                field = _resolve_location(model, tuple(error["loc"]))
                errors.setdefault(field, []).append(error["msg"])
            logger.debug(f"Annotation validation of {type(model).__name__}: {e.error_count()} error(s)")
            return errors
        return {}

    def validate_field(self, model: Any, field: FieldIdentity) -> List[str]:
        """Messages for one field, computed by validating the whole model."""
        return self.validate_model(model).get(field, [])
