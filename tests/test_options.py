from types import SimpleNamespace

import pytest
from fastapi import FastAPI

from httpjson.errors import OptionsReadOnlyError
from httpjson.options import DEFAULT_SERIALIZER_OPTIONS
from httpjson.options import JsonOptions
from httpjson.options import JsonSerializerOptions
from httpjson.options import NamingPolicy
from httpjson.options import options_from_request
from httpjson.options import resolve_options


def test_default_options():
    assert DEFAULT_SERIALIZER_OPTIONS.is_read_only
    assert (
        DEFAULT_SERIALIZER_OPTIONS.property_naming_policy
        is NamingPolicy.CAMEL_CASE
    )
    assert DEFAULT_SERIALIZER_OPTIONS.property_name_case_insensitive
    assert DEFAULT_SERIALIZER_OPTIONS.relaxed_escaping
    assert not DEFAULT_SERIALIZER_OPTIONS.allow_trailing_commas
    assert not DEFAULT_SERIALIZER_OPTIONS.write_indented


def test_default_options_cannot_be_modified():
    with pytest.raises(OptionsReadOnlyError):
        DEFAULT_SERIALIZER_OPTIONS.write_indented = True
    assert not DEFAULT_SERIALIZER_OPTIONS.write_indented


def test_clone_is_independent_and_modifiable():
    copy = DEFAULT_SERIALIZER_OPTIONS.clone()
    assert not copy.is_read_only
    copy.write_indented = True
    assert copy.write_indented
    assert not DEFAULT_SERIALIZER_OPTIONS.write_indented


def test_assignment_is_validated():
    opts = JsonSerializerOptions()
    opts.property_naming_policy = "snake_case"
    assert opts.property_naming_policy is NamingPolicy.SNAKE_CASE


def test_json_options_instances_do_not_share_state():
    a = JsonOptions()
    b = JsonOptions()
    a.serializer_options.allow_trailing_commas = True
    assert not b.serializer_options.allow_trailing_commas
    assert (
        a.serializer_options.property_naming_policy
        is NamingPolicy.CAMEL_CASE
    )


def test_from_base_copies_and_isolates():
    base = JsonOptions()
    base.serializer_options.write_indented = True
    derived = JsonOptions.from_base(base)
    assert derived.serializer_options.write_indented

    derived.serializer_options.ignore_null_values = True
    assert not base.serializer_options.ignore_null_values


def test_resolve_options_explicit_wins():
    explicit = JsonSerializerOptions(write_indented=True)
    context = JsonSerializerOptions(allow_trailing_commas=True)
    assert resolve_options(explicit, lambda: context) is explicit


def test_resolve_options_uses_context():
    context = JsonSerializerOptions(allow_trailing_commas=True)
    assert resolve_options(None, lambda: context) is context


def test_resolve_options_falls_back_to_default():
    assert resolve_options(None) is DEFAULT_SERIALIZER_OPTIONS
    assert resolve_options(None, lambda: None) is DEFAULT_SERIALIZER_OPTIONS


def test_options_from_request_without_registration(make_request):
    assert options_from_request(make_request()) is None


def test_options_from_request_uses_app_options(make_request):
    app = FastAPI()
    app.state.json_options = JsonOptions()
    request = make_request(app=app)
    assert (
        options_from_request(request)
        is app.state.json_options.serializer_options
    )


def test_options_from_request_prefers_request_scope(make_request):
    app = FastAPI()
    app.state.json_options = JsonOptions()
    request = make_request(app=app)
    request.state.json_options = JsonOptions.from_base(app.state.json_options)
    assert (
        options_from_request(request)
        is request.state.json_options.serializer_options
    )


def test_options_from_request_ignores_bare_app(make_request):
    request = make_request(app=SimpleNamespace(state=SimpleNamespace()))
    assert options_from_request(request) is None
