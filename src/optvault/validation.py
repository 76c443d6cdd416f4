"""Type-dispatched validation of option values.

Each option type has one rule registered in :data:`RULES`.  A rule receives
the validator, the value and the field id, and returns the sanitized value.
Rules never raise for bad input: they coerce the value to a safe fallback and
report a :class:`~optvault.reporting.ValidationError` instead.  Composite
rules validate their sub-fields by calling back into the validator.
"""

from __future__ import annotations

import logging
import re
import threading
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from . import hooks as hook_names
from .hooks import Hooks
from .phpcompat import any_truthy, is_blank, is_container, is_empty, is_int_literal, is_numeric, items
from .reporting import ERROR_SCOPE, ErrorChannel, ErrorLog, ValidationError
from .sanitizers import Sanitizers
from .translation import TranslationRegistry

logger = logging.getLogger("optvault")

Rule = Callable[["Validator", Any, str], Any]

RULES: dict[str, Rule] = {}

TEXT_TYPES = ("css", "javascript", "text", "textarea", "textarea-simple")
SINGLE_STRING_TYPES = ("text", "textarea", "textarea-simple")

_HEX_RX = re.compile(r"#([a-f0-9]{6}|[a-f0-9]{3})", re.I)
_RGBA_RX = re.compile(
    r"rgba\(\s*([0-9]{1,3})\s*,\s*([0-9]{1,3})\s*,\s*([0-9]{1,3})\s*,\s*([0-9.]{1,4})\s*\)",
    re.I,
)


def register_rule(*types: str) -> Callable[[Rule], Rule]:
    """Register a rule function for one or more option types."""

    def deco(fn: Rule) -> Rule:
        for name in types:
            RULES[name] = fn
        return fn

    return deco


@dataclass
class ValidationResult:
    value: Any
    errors: list[ValidationError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


class Validator:
    """Sanitize option values according to their declared type."""

    def __init__(
        self,
        *,
        sanitizers: Sanitizers | None = None,
        errors: ErrorChannel | None = None,
        hooks: Hooks | None = None,
        translations: TranslationRegistry | None = None,
        allow_unfiltered_markup: bool = False,
        has_unrestricted_markup: Callable[[], bool] | None = None,
    ) -> None:
        self.sanitizers = sanitizers or Sanitizers()
        self.errors = errors if errors is not None else ErrorLog()
        self.hooks = hooks or Hooks()
        self.translations = translations
        self.allow_unfiltered_markup = allow_unfiltered_markup
        self._has_unrestricted_markup = has_unrestricted_markup or (lambda: False)
        # Collectors for the checks in progress, one stack per thread.
        self._local = threading.local()

    @property
    def _pending(self) -> list[list[ValidationError]]:
        stack = getattr(self._local, "pending", None)
        if stack is None:
            stack = self._local.pending = []
        return stack

    # ------------------------------------------------------------------
    # public API
    # ------------------------------------------------------------------
    def validate(self, value: Any, type: str, field_id: str, wpml_id: str = "") -> Any:
        """Return *value* sanitized for option *type*.

        Errors are sent to the error channel; the returned value is always
        usable.
        """
        return self.check(value, type, field_id, wpml_id).value

    def check(self, value: Any, type: str, field_id: str, wpml_id: str = "") -> ValidationResult:
        """Like :meth:`validate` but also return the errors raised."""
        collected: list[ValidationError] = []
        self._pending.append(collected)
        try:
            result = self._validate(value, type, field_id, wpml_id)
        finally:
            self._pending.pop()
        for err in collected:
            self.errors.report(ERROR_SCOPE, err.code, err.message, "error")
        return ValidationResult(result, collected)

    def markup_filtered(self) -> bool:
        """Return ``True`` when text types must be stripped of unsafe markup."""
        return not self._has_unrestricted_markup() and not self.allow_unfiltered_markup

    # ------------------------------------------------------------------
    # helpers used by rules
    # ------------------------------------------------------------------
    def sub(self, value: Any, type: str, field_id: str) -> Any:
        """Validate a sub-field as part of the current validation."""
        return self._validate(value, type, field_id, "")

    def error(self, code: str, field_id: str, message: str) -> None:
        err = ValidationError(code, field_id, message)
        if self._pending:
            self._pending[-1].append(err)
        else:
            self.errors.report(ERROR_SCOPE, code, message, "error")

    def _validate(self, value: Any, type: str, field_id: str, wpml_id: str) -> Any:
        if is_empty(value) or not type or not field_id:
            return value

        value = self.hooks.apply(hook_names.VALIDATE_SETTING, value, type, field_id)

        if wpml_id and self.translations is not None:
            single = self.hooks.apply(hook_names.WPML_OPTION_TYPES, list(SINGLE_STRING_TYPES))
            if type in single:
                if not is_empty(value):
                    self.translations.register_string(wpml_id, value)
                else:
                    self.translations.unregister_string(wpml_id)

        rule = RULES.get(type)
        if rule is not None:
            value = rule(self, value, field_id)
        else:
            logger.debug("no rule for option type %r (%s)", type, field_id)

        return self.hooks.apply(hook_names.AFTER_VALIDATE_SETTING, value, type, field_id)


def _as_dict(value: Any) -> dict:
    return dict(items(value))


def _drop_blank(value: dict) -> dict:
    return {k: v for k, v in value.items() if not is_blank(v)}


def _at(value: Any, index: int) -> Any:
    if isinstance(value, dict):
        return value.get(index, "")
    return value[index]


def _numeric_message(key: str, field_id: str) -> str:
    return (
        f"The <code>{key}</code> input field for <code>{field_id}</code> "
        "only allows numeric values."
    )


# ----------------------------------------------------------------------
# composite rules
# ----------------------------------------------------------------------
@register_rule("background")
def _background(v: Validator, value: Any, field_id: str) -> Any:
    value = _as_dict(value)
    if "background-color" in value:
        value["background-color"] = v.sub(value["background-color"], "colorpicker", field_id)
    if "background-image" in value:
        value["background-image"] = v.sub(value["background-image"], "upload", field_id)
    return value if any_truthy(value) else ""


@register_rule("border")
def _border(v: Validator, value: Any, field_id: str) -> Any:
    value = _as_dict(value)
    for key, item in list(value.items()):
        if key == "width" and not is_empty(item) and not is_numeric(item):
            value[key] = "0"
            v.error("invalid_border_width", field_id, _numeric_message("width", field_id))
        if key == "color" and not is_empty(item):
            value[key] = v.sub(item, "colorpicker", field_id)
    value = _drop_blank(value)
    return value or ""


@register_rule("box-shadow")
def _box_shadow(v: Validator, value: Any, field_id: str) -> Any:
    value = _as_dict(value)
    value["inset"] = "inset" if value.get("inset") is not None else ""
    for key in ("offset-x", "offset-y", "blur-radius", "spread-radius"):
        if key in value:
            value[key] = v.sub(value[key], "text", field_id)
    if "color" in value:
        value["color"] = v.sub(value["color"], "colorpicker", field_id)
    value = _drop_blank(value)
    return value or ""


def _numeric_fields(v: Validator, value: Any, field_id: str, prefix: str) -> Any:
    value = _as_dict(value)
    invalid = []
    for key, item in value.items():
        if not is_empty(item) and not is_numeric(item) and key != "unit":
            invalid.append(key)
    for key in invalid:
        value[key] = "0"
        v.error(f"invalid_{prefix}_{key}", field_id, _numeric_message(key, field_id))
    value = _drop_blank(value)
    return value or ""


@register_rule("dimension")
def _dimension(v: Validator, value: Any, field_id: str) -> Any:
    return _numeric_fields(v, value, field_id, "dimension")


@register_rule("spacing")
def _spacing(v: Validator, value: Any, field_id: str) -> Any:
    return _numeric_fields(v, value, field_id, "spacing")


@register_rule("google-fonts")
def _google_fonts(v: Validator, value: Any, field_id: str) -> Any:
    if isinstance(value, dict):
        value = {k: item for k, item in value.items() if k != "%key%"}
        value = list(value.values())
    elif not isinstance(value, list):
        value = []
    return value or ""


@register_rule("link-color")
def _link_color(v: Validator, value: Any, field_id: str) -> Any:
    if not is_container(value):
        return ""
    out = _as_dict(value) if isinstance(value, dict) else list(value)
    for key, item in items(value):
        if not is_empty(item):
            out[key] = v.sub(item, "colorpicker", f"{field_id}-{key}")
    return out if any_truthy(out) else ""


@register_rule("measurement")
def _measurement(v: Validator, value: Any, field_id: str) -> Any:
    if isinstance(value, dict):
        value = dict(value)
    elif isinstance(value, list):
        value = list(value) + [""] * (2 - len(value))
    else:
        value = [value, ""]
    value[0] = v.sanitizers.sanitize_text_field(_at(value, 0))
    if is_blank(value[0]) and is_empty(_at(value, 1)):
        return ""
    return value


@register_rule("typography")
def _typography(v: Validator, value: Any, field_id: str) -> Any:
    if not isinstance(value, dict) or value.get("font-color") is None:
        return value
    value = dict(value)
    value["font-color"] = v.sub(value["font-color"], "colorpicker", field_id)
    return value if any_truthy(value) else ""


@register_rule("social-links")
def _social_links(v: Validator, value: Any, field_id: str) -> Any:
    if not is_container(value):
        return ""
    out = _as_dict(value) if isinstance(value, dict) else list(value)
    has_value = False
    for key, entry in items(value):
        if is_empty(entry) or not is_container(entry):
            continue
        entry = _as_dict(entry) if isinstance(entry, dict) else list(entry)
        for item_key, item in items(entry):
            if not is_empty(item):
                entry[item_key] = v.sanitizers.sanitize_text_field(item)
                if not is_empty(entry[item_key]):
                    has_value = True
        out[key] = entry
    return out if has_value else ""


# ----------------------------------------------------------------------
# scalar rules
# ----------------------------------------------------------------------
@register_rule("colorpicker")
def _colorpicker(v: Validator, value: Any, field_id: str) -> Any:
    text = "" if is_container(value) else str(value)
    if _HEX_RX.fullmatch(text) is None and _RGBA_RX.fullmatch(text) is None:
        v.error(
            "invalid_hex",
            field_id,
            f"The <code>{field_id}</code> Colorpicker only allows valid hexadecimal or rgba values.",
        )
        return ""
    return value


@register_rule("colorpicker-opacity")
def _colorpicker_opacity(v: Validator, value: Any, field_id: str) -> Any:
    if is_container(value):
        value = ""
    return v.sub(value, "colorpicker", field_id)


def _map_strings(fn: Callable[[str], str], value: Any) -> Any:
    if isinstance(value, dict):
        return {k: _map_strings(fn, item) for k, item in value.items()}
    if isinstance(value, list):
        return [_map_strings(fn, item) for item in value]
    if isinstance(value, str):
        return fn(value)
    return value


@register_rule(*TEXT_TYPES)
def _text(v: Validator, value: Any, field_id: str) -> Any:
    if v.markup_filtered():
        return _map_strings(v.sanitizers.strip_unsafe_markup, value)
    return value


@register_rule("upload")
def _upload(v: Validator, value: Any, field_id: str) -> Any:
    if is_container(value):
        return ""
    if is_int_literal(value):
        return value
    return v.sanitizers.sanitize_url(value)


@register_rule("gallery")
def _gallery(v: Validator, value: Any, field_id: str) -> Any:
    return value.strip() if isinstance(value, str) else value
