from roadmap.errors import ValidationError
from roadmap.utils.validators import clean_str, clean_text, is_valid_email

TITLE_MAX = 255
CONTENT_MAX = 10000
EMAIL_MAX = 255
NAME_MAX = 255


def _string_or_error(payload: dict, key: str, errors: dict, required: bool):
    raw = payload.get(key)
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        if required:
            errors.setdefault(key, []).append(f"The {key} field is required.")
        return None
    if not isinstance(raw, str):
        errors.setdefault(key, []).append(f"The {key} field must be a string.")
        return None
    return raw


def validate_submission(payload) -> dict:
    """
    Validate a widget submission. Collects every failing field before raising
    ValidationError so the widget can highlight all of them at once.
    Returns cleaned kwargs for ``submit_feedback``.
    """
    if not isinstance(payload, dict):
        payload = {}
    errors: dict[str, list[str]] = {}

    title = _string_or_error(payload, "title", errors, required=True)
    content = _string_or_error(payload, "content", errors, required=True)
    email = _string_or_error(payload, "email", errors, required=False)
    name = _string_or_error(payload, "name", errors, required=False)

    if title is not None and len(title.strip()) > TITLE_MAX:
        errors.setdefault("title", []).append(f"The title may not be greater than {TITLE_MAX} characters.")
    if content is not None and len(content.strip()) > CONTENT_MAX:
        errors.setdefault("content", []).append(f"The content may not be greater than {CONTENT_MAX} characters.")
    if email is not None:
        email = email.strip().lower()
        if len(email) > EMAIL_MAX or not is_valid_email(email):
            errors.setdefault("email", []).append("The email must be a valid email address.")
    if name is not None and len(name.strip()) > NAME_MAX:
        errors.setdefault("name", []).append(f"The name may not be greater than {NAME_MAX} characters.")

    if errors:
        raise ValidationError(errors)

    return {
        "title": clean_str(title, max_len=TITLE_MAX),
        "content": clean_text(content),
        "email": email or None,
        "name": clean_str(name, max_len=NAME_MAX),
    }
