import pytest

from catalog_lib.errors import MissingCredentialError, MissingPreconditionError, get_error_message, run_script


def test_run_script_exit_codes(caplog):
    assert run_script(lambda: None, "ok") == 0
    assert run_script(lambda: 3, "rc") == 3


def _raise(exc):
    def main():
        raise exc

    return main


@pytest.mark.parametrize("exc", [MissingPreconditionError("no input"), MissingCredentialError("no key")])
def test_precondition_failures_logged_without_traceback(exc, caplog):
    assert run_script(_raise(exc), "step") == 1
    assert "step aborted" in caplog.text
    assert "Traceback" not in caplog.text


def test_unexpected_failure_logged_with_traceback(caplog):
    assert run_script(_raise(KeyError("platform_id")), "step") == 1
    assert "Critical error in step" in caplog.text
    assert caplog.records[-1].exc_info is not None


def test_get_error_message():
    assert get_error_message(None) == "Unknown error occurred"
    assert get_error_message("plain") == "plain"
    assert get_error_message(ValueError()) == "ValueError"
