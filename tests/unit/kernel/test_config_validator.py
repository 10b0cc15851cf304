"""ConfigValidator: filter configuration checked against JSON Schema."""

import pytest

from paramguard.kernel.params.config_validator import (
    FILTER_CONFIG_SCHEMA,
    PARAM_ENTRY_SCHEMA,
    ConfigValidator,
)
from paramguard.kernel.params.errors import ActionParamConfigError, ValidationErrorCode


@pytest.mark.unit
@pytest.mark.P1
@pytest.mark.oracle_schema
class TestConfigValidator:
    """Shape checks before any rule is built."""

    def test_valid_entry_accepted(self) -> None:
        validator = ConfigValidator()

        # Should not raise
        validator.validate({"source": "get,post"}, PARAM_ENTRY_SCHEMA)
        validator.validate({"source": ["get", "post"]}, PARAM_ENTRY_SCHEMA)

    def test_blank_source_rejected(self) -> None:
        validator = ConfigValidator()

        with pytest.raises(ActionParamConfigError) as exc_info:
            validator.validate({"source": " , "}, PARAM_ENTRY_SCHEMA, "delete", "id")

        error = exc_info.value
        assert error.code == ValidationErrorCode.CONFIG_MALFORMED
        assert error.action_id == "delete"
        assert error.param_name == "id"

    def test_name_key_rejected(self) -> None:
        validator = ConfigValidator()

        with pytest.raises(ActionParamConfigError) as exc_info:
            validator.validate({"source": "get", "name": "other"}, PARAM_ENTRY_SCHEMA)

        assert exc_info.value.code == ValidationErrorCode.CONFIG_MALFORMED

    def test_error_path_reported(self) -> None:
        validator = ConfigValidator()

        with pytest.raises(ActionParamConfigError) as exc_info:
            validator.validate({"provide_action_params": "yes"}, FILTER_CONFIG_SCHEMA)

        assert "provide_action_params" in exc_info.value.message

    def test_malformed_schema_reported(self) -> None:
        validator = ConfigValidator()

        with pytest.raises(ActionParamConfigError) as exc_info:
            validator.validate({}, {"type": "not-a-type"})

        assert exc_info.value.code == ValidationErrorCode.CONFIG_MALFORMED
        assert "malformed" in exc_info.value.message.lower()
