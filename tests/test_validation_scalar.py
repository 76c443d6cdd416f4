from __future__ import annotations

import threading

import pytest

from optvault.hooks import AFTER_VALIDATE_SETTING, VALIDATE_SETTING, Hooks
from optvault.translation import StringRegistry
from optvault.validation import RULES, Validator


@pytest.mark.parametrize("value", ["", [], 0, None, "0", {}])
@pytest.mark.parametrize("type_", sorted(RULES))
def test_empty_values_pass_through(validator, errors, value, type_):
    assert validator.validate(value, type_, "field") == value
    assert len(errors) == 0


def test_missing_type_or_field_returns_input(validator):
    assert validator.validate("#GGG", "", "field") == "#GGG"
    assert validator.validate("#GGG", "colorpicker", "") == "#GGG"


@pytest.mark.parametrize(
    "value",
    ["#fff", "#FFF", "#a1b2c3", "rgba(1,2,3,0.5)", "rgba( 255 , 0 , 0 , 1 )", "RGBA(0,0,0,.25)"],
)
def test_colorpicker_accepts(validator, errors, value):
    assert validator.validate(value, "colorpicker", "link") == value
    assert len(errors) == 0


@pytest.mark.parametrize("value", ["#GGG", "#abcd", "fff", "red", "rgb(1,2,3)", "rgba(1,2,3,0.5) x"])
def test_colorpicker_rejects(validator, errors, value):
    result = validator.check(value, "colorpicker", "link")
    assert result.value == ""
    assert [e.code for e in result.errors] == ["invalid_hex"]
    assert result.errors[0].field_id == "link"
    assert "<code>link</code>" in result.errors[0].message
    assert errors.codes() == ["invalid_hex"]


def test_colorpicker_opacity(validator, errors):
    assert validator.validate("rgba(0,0,0,0.4)", "colorpicker-opacity", "f") == "rgba(0,0,0,0.4)"
    assert validator.validate({"color": "#fff"}, "colorpicker-opacity", "f") == ""
    assert len(errors) == 0
    assert validator.validate("nope", "colorpicker-opacity", "f") == ""
    assert errors.codes() == ["invalid_hex"]


@pytest.mark.parametrize("type_", ["css", "javascript", "text", "textarea", "textarea-simple"])
def test_text_types_strip_unsafe_markup(validator, type_):
    raw = '<script>alert(1)</script><b onclick="x()">hi</b>'
    assert validator.validate(raw, type_, "intro") == "<b>hi</b>"


def test_text_unfiltered_when_allowed():
    raw = "<script>alert(1)</script>"
    assert Validator(allow_unfiltered_markup=True).validate(raw, "text", "f") == raw
    trusted = Validator(has_unrestricted_markup=lambda: True)
    assert trusted.validate(raw, "textarea", "f") == raw


def test_text_sanitizes_nested_strings(validator):
    value = {"a": "<i>ok</i><iframe src='x'></iframe>", "b": 3}
    assert validator.validate(value, "text", "f") == {"a": "<i>ok</i>", "b": 3}


def test_upload(validator):
    assert validator.validate("42", "upload", "logo") == "42"
    assert validator.validate(42, "upload", "logo") == 42
    assert validator.validate("http://x", "upload", "logo") == "http://x"
    assert validator.validate("example.com/a.png", "upload", "logo") == "http://example.com/a.png"
    assert validator.validate("javascript:alert(1)", "upload", "logo") == ""


def test_gallery_trims(validator):
    assert validator.validate("  1,2,3 \n", "gallery", "pics") == "1,2,3"


def test_unknown_type_passes_through(validator):
    assert validator.validate("<script>x</script>", "select", "f") == "<script>x</script>"


def test_translation_registration():
    registry = StringRegistry()
    v = Validator(translations=registry)
    v.validate("Hello", "text", "greeting", wpml_id="greeting_wpml")
    assert registry["greeting_wpml"] == "Hello"
    v.validate("#fff", "colorpicker", "color", wpml_id="color_wpml")
    assert "color_wpml" not in registry


def test_translation_unregistered_when_filtered_empty():
    registry = StringRegistry()
    registry.register_string("greeting_wpml", "old")
    hooks = Hooks()
    hooks.add_filter(VALIDATE_SETTING, lambda value, type_, field_id: "")
    v = Validator(translations=registry, hooks=hooks)
    assert v.validate("Hello", "text", "greeting", wpml_id="greeting_wpml") == ""
    assert "greeting_wpml" not in registry


def test_translation_types_are_filterable():
    registry = StringRegistry()
    hooks = Hooks()
    hooks.add_filter("wpml_option_types", lambda types: types + ["gallery"])
    v = Validator(translations=registry, hooks=hooks)
    v.validate("1,2", "gallery", "pics", wpml_id="pics_wpml")
    assert registry["pics_wpml"] == "1,2"


def test_pre_and_post_filters():
    hooks = Hooks()
    hooks.add_filter(VALIDATE_SETTING, lambda value, type_, field_id: value.strip())
    hooks.add_filter(AFTER_VALIDATE_SETTING, lambda value, type_, field_id: value.upper())
    v = Validator(hooks=hooks)
    assert v.validate("  #abc  ", "colorpicker", "f") == "#ABC"


def test_concurrent_checks_keep_their_own_errors(errors):
    b_started = threading.Event()
    a_done = threading.Event()

    def interleave(value, type_, field_id):
        if field_id == "field_b":
            b_started.set()
            a_done.wait(5)
        else:
            b_started.wait(5)
        return value

    hooks = Hooks()
    hooks.add_filter(VALIDATE_SETTING, interleave)
    v = Validator(hooks=hooks, errors=errors)
    results = {}

    def run_b():
        results["b"] = v.check("#fff", "colorpicker", "field_b")

    thread_b = threading.Thread(target=run_b)
    thread_b.start()
    try:
        results["a"] = v.check("#GGG", "colorpicker", "field_a")
    finally:
        a_done.set()
        thread_b.join(5)

    assert [(e.code, e.field_id) for e in results["a"].errors] == [("invalid_hex", "field_a")]
    assert results["b"].ok
    assert results["b"].value == "#fff"
    assert errors.codes() == ["invalid_hex"]
