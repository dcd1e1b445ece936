from typer.testing import CliRunner

import lps25h_module
from sensehat.errors import RegistrationError

runner = CliRunner()


def test_exits_nonzero_on_registration_failure(monkeypatch):
    def fail(self, api, model):
        raise RegistrationError("nope")

    monkeypatch.setattr("sensehat.module.Module.add_model_from_registry", fail)
    result = runner.invoke(lps25h_module.app, ["/tmp/lps25h.sock"])
    assert result.exit_code == 1


def test_exits_zero_after_shutdown(monkeypatch):
    async def shutdown_immediately(self):
        return None

    monkeypatch.setattr("sensehat.module.Module.run_until_shutdown", shutdown_immediately)
    result = runner.invoke(lps25h_module.app, ["/tmp/lps25h.sock", "--log-level", "debug"])
    assert result.exit_code == 0


def test_log_level_from_environment(monkeypatch):
    levels = []

    async def shutdown_immediately(self):
        return None

    monkeypatch.setattr("sensehat.module.Module.run_until_shutdown", shutdown_immediately)
    monkeypatch.setattr("lps25h_module.logging.basicConfig", lambda **kwargs: levels.append(kwargs["level"]))
    result = runner.invoke(lps25h_module.app, ["/tmp/lps25h.sock"], env={"LPS25H_LOG_LEVEL": "warning"})
    assert result.exit_code == 0
    assert levels == ["WARNING"]
