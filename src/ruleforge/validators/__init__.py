"""Built-in validators for RuleForge.

BUILTIN_VALIDATORS maps each rule name to its normalized definition. The
ValidatorRegistry seeds itself from this mapping.
"""

from ruleforge.types import DefinitionKind, PredicateFn, ValidatorDefinition
from ruleforge.validators import builtin, files
from ruleforge.validators.files import (
    ImageProbe,
    UploadedFile,
    pillow_probe,
    set_image_probe,
)

_PREDICATES: dict[str, PredicateFn] = {
    "alpha": builtin.alpha,
    "alpha_dash": builtin.alpha_dash,
    "alpha_num": builtin.alpha_num,
    "between": builtin.between,
    "digits": builtin.digits,
    "dimensions": files.dimensions,
    "email": builtin.email,
    "ext": files.ext,
    "image": files.image,
    "in": builtin.in_list,
    "ip": builtin.ip,
    "max": builtin.max_length,
    "mimes": files.mimes,
    "min": builtin.min_length,
    "not_in": builtin.not_in_list,
    "numeric": builtin.numeric,
    "regex": builtin.regex,
    "required": builtin.required,
    "size": files.size,
    "url": builtin.url,
}

BUILTIN_VALIDATORS: dict[str, ValidatorDefinition] = {
    name: ValidatorDefinition(
        name=name, validate=fn, kind=DefinitionKind.BUILTIN, shared=True
    )
    for name, fn in _PREDICATES.items()
}

__all__ = [
    "BUILTIN_VALIDATORS",
    "ImageProbe",
    "UploadedFile",
    "pillow_probe",
    "set_image_probe",
]
