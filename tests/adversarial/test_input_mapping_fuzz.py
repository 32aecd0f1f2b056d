"""Adversarial tests: hostile or malformed action inputs.

These tests verify that:
1. Boolean flags are enabled only by the exact string ``true``
2. Unknown ``INPUT_*`` variables are ignored
3. Blank inputs never override defaults
4. Unparseable booleans outside the action mapping fail validation
"""

from __future__ import annotations

import pytest
from hypothesis import given
from hypothesis import strategies as st
from pydantic import ValidationError

from binrelease.config import ACTION_FLAGS, ACTION_INPUTS, ReleaseSettings, map_action_inputs


@given(value=st.text(max_size=12).filter(lambda v: v != "true"))
def test_flags_need_exact_true(value: str):
    environ = {key: value for key in ACTION_FLAGS}
    mapped = map_action_inputs(environ)
    assert not set(ACTION_FLAGS.values()) & set(mapped)


@given(
    key=st.text(alphabet="ABCDEFGHIJKLMNOPQRSTUVWXYZ_", min_size=1, max_size=20),
    value=st.text(min_size=1, max_size=20),
)
def test_unknown_inputs_ignored(key: str, value: str):
    input_key = f"INPUT_{key}"
    if input_key in ACTION_INPUTS or input_key in ACTION_FLAGS or input_key == "INPUT_VERSION":
        return
    assert map_action_inputs({input_key: value}) == {}


def test_blank_inputs_are_unset():
    environ = {key: "" for key in ACTION_INPUTS}
    assert map_action_inputs(environ) == {}


@pytest.mark.parametrize("ref", ["1.2.3", "release-1.2.3", "", "V1.2.3"])
def test_version_only_from_v_prefixed_ref(ref: str):
    assert "version" not in map_action_inputs({"GITHUB_REF_NAME": ref})


def test_input_version_beats_ref():
    mapped = map_action_inputs({"INPUT_VERSION": "2.0.0", "GITHUB_REF_NAME": "v1.0.0"})
    assert mapped["version"] == "2.0.0"


@pytest.mark.parametrize("value", ["maybe", "2", "yes please"])
def test_unparseable_boolean_env(clean_env, value: str):
    clean_env.setenv("ARCHIVE", value)
    with pytest.raises(ValidationError):
        ReleaseSettings(_env_file=None)


@given(value=st.text(max_size=40))
def test_string_inputs_copied_verbatim(value: str):
    mapped = map_action_inputs({"INPUT_FEATURES": value})
    if value:
        assert mapped == {"features": value}
    else:
        assert mapped == {}
