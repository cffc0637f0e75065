from .json_path import eval_json_path_as_string
from .passwords import PasswordValidation, get_password_strength, validate_password_strength

__all__ = [
    "PasswordValidation",
    "eval_json_path_as_string",
    "get_password_strength",
    "validate_password_strength",
]
