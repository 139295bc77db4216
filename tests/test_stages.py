"""
Tests for stages — prerequisites, stacks and idempotence.
"""

import pytest

from devsetup.core.errors import (
    ExternalCommandFailure,
    SetupError,
    ToolchainMissing,
    UserDeclined,
)
from devsetup.core.models.tool import ToolSpec
from devsetup.core.stages import (
    AcademicStage,
    DataScienceStage,
    PackageManagerStage,
    PowerCheckStage,
    ToolchainStage,
    WebJsStage,
    WebPythonStage,
)
from devsetup.core.stages.stacks import latest_patch

from tests.simulated_host import BREW, PYENV_LISTING, SimulatedHost

# ── Power check ──────────────────────────────────────────────────────


class TestPowerCheck:
    @pytest.mark.parametrize("answer", ["y", "Y", "yes", " YES "])
    def test_affirmative(self, host, make_ctx, answer):
        ctx = make_ctx(host, [answer])
        result = PowerCheckStage(ctx).run()
        assert result.status == "ok"
        assert host.call_count == 0

    @pytest.mark.parametrize("answer", ["n", "N", "", "nope", "1"])
    def test_anything_else_declines(self, host, make_ctx, answer):
        ctx = make_ctx(host, [answer])
        with pytest.raises(UserDeclined, match="Plug in first"):
            PowerCheckStage(ctx).run()
        assert host.call_count == 0


# ── Toolchain ────────────────────────────────────────────────────────


class TestToolchain:
    def test_already_present(self, make_ctx):
        host = SimulatedHost(toolchain=True)
        ctx = make_ctx(host)
        result = ToolchainStage(ctx).run()
        assert result.status == "skipped"
        assert host.executed == []
        assert ctx.prompt.questions == []

    def test_installs_and_waits_for_user(self, make_ctx):
        host = SimulatedHost(toolchain=False)
        ctx = make_ctx(host, [""])
        ToolchainStage(ctx).run()
        assert host.executed == [["xcode-select", "--install"]]
        assert ctx.prompt.questions == ["Press Enter after installation is complete."]
        assert host.toolchain

    def test_confirmed_but_not_installed(self, make_ctx):
        host = SimulatedHost(toolchain=False, toolchain_install_completes=False)
        ctx = make_ctx(host, [""])
        with pytest.raises(ToolchainMissing):
            ToolchainStage(ctx).run()

    def test_installer_launch_fails(self, make_ctx):
        host = SimulatedHost(toolchain=False)
        host.set_failure(["xcode-select", "--install"])
        ctx = make_ctx(host, [""])
        with pytest.raises(ExternalCommandFailure):
            ToolchainStage(ctx).run()
        assert ctx.prompt.questions == []


# ── Package manager ──────────────────────────────────────────────────


class TestPackageManager:
    def test_present_refreshes_only(self, make_ctx, settings):
        host = SimulatedHost(brew=True)
        ctx = make_ctx(host)
        PackageManagerStage(ctx).run()
        assert host.executed == [[BREW, "update"]]
        assert host.brew_installs == 0

    def test_present_with_empty_profile_gets_hook(self, make_ctx, settings):
        settings.profile_path.write_text("")
        host = SimulatedHost(brew=True)
        result = PackageManagerStage(make_ctx(host)).run()
        assert result.profile_changed
        assert settings.profile_path.read_text() == (
            'eval "$(/opt/homebrew/bin/brew shellenv)"\n'
        )
        PackageManagerStage(make_ctx(host)).run()
        assert settings.profile_path.read_text().count("brew shellenv") == 1
        assert host.brew_installs == 0

    def test_install_interrupted_before_profile(self, make_ctx, settings):
        # brew landed on disk but the previous run never reached the profile
        host = SimulatedHost(brew=True)
        settings.profile_path.write_text("export EDITOR=vim\n")
        PackageManagerStage(make_ctx(host)).run()
        assert settings.profile_path.read_text().splitlines() == [
            "export EDITOR=vim",
            'eval "$(/opt/homebrew/bin/brew shellenv)"',
        ]

    def test_present_exports_environment(self, make_ctx):
        ctx = make_ctx(SimulatedHost(brew=True))
        PackageManagerStage(ctx).run()
        env = ctx.runner.env
        assert env["HOMEBREW_PREFIX"] == "/opt/homebrew"
        assert env["PATH"].startswith("/opt/homebrew/bin:/opt/homebrew/sbin:")

    def test_absent_installs(self, make_ctx, settings):
        host = SimulatedHost(brew=False)
        ctx = make_ctx(host)
        result = PackageManagerStage(ctx).run()

        (command,) = host.executed
        assert command[:2] == ["/bin/bash", "-c"]
        assert settings.homebrew.install_url in command[2]
        assert "curl -fsSL" in command[2]
        assert result.profile_changed
        assert settings.profile_path.read_text() == (
            'eval "$(/opt/homebrew/bin/brew shellenv)"\n'
        )
        assert ctx.runner.env["PATH"].startswith("/opt/homebrew/bin:")

    def test_install_url_is_quoted(self, make_ctx, settings):
        settings.homebrew.install_url = "https://example.com/install.sh; rm -rf ~"
        host = SimulatedHost(brew=False)
        PackageManagerStage(make_ctx(host)).run()
        (command,) = host.executed
        assert "curl -fsSL 'https://example.com/install.sh; rm -rf ~'" in command[2]

    def test_rerun_after_install_updates(self, make_ctx, settings):
        host = SimulatedHost(brew=False)
        PackageManagerStage(make_ctx(host)).run()
        PackageManagerStage(make_ctx(host)).run()
        assert host.brew_installs == 1
        assert host.brew_updates == 1
        assert settings.profile_path.read_text().count("brew shellenv") == 1

    def test_install_script_failure(self, make_ctx, settings):
        host = SimulatedHost(brew=False)
        host.set_failure(["/bin/bash"], return_code=1)
        with pytest.raises(ExternalCommandFailure):
            PackageManagerStage(make_ctx(host)).run()
        assert not settings.profile_path.exists()


# ── Stacks ───────────────────────────────────────────────────────────


class TestAcademic:
    def test_installs(self, host, make_ctx):
        AcademicStage(make_ctx(host)).run()
        assert host.executed == [
            [BREW, "install", "python", "gcc", "openjdk"],
            [BREW, "install", "--cask", "visual-studio-code"],
            [
                "/opt/homebrew/bin/code",
                "--install-extension", "ms-python.python",
                "--install-extension", "ms-vscode.cpptools",
                "--install-extension", "redhat.java",
            ],
        ]
        assert host.extensions == {"ms-python.python", "ms-vscode.cpptools", "redhat.java"}

    def test_extension_failure_is_best_effort(self, host, make_ctx):
        host.set_failure(["/opt/homebrew/bin/code"], return_code=1)
        result = AcademicStage(make_ctx(host)).run()
        assert result.status == "ok"
        assert result.receipts[-1].failed

    def test_formula_failure_is_fatal(self, host, make_ctx):
        host.set_failure([BREW, "install", "python"])
        with pytest.raises(ExternalCommandFailure):
            AcademicStage(make_ctx(host)).run()
        assert host.casks == set()

    def test_empty_collections_run_nothing(self, host, make_ctx, settings):
        settings.academic.formulae = []
        settings.academic.casks = []
        settings.academic.extensions = []
        AcademicStage(make_ctx(host)).run()
        assert host.executed == []


class TestDataScience:
    def test_creates_env(self, host, make_ctx):
        ctx = make_ctx(host)
        DataScienceStage(ctx).run()
        conda = host.programs["conda"]
        assert host.executed[-1] == [
            conda, "create", "-y", "-n", "datasci", "python=3.12",
            "numpy", "pandas", "matplotlib", "scipy", "scikit-learn", "jupyterlab",
        ]
        assert "conda activate datasci" in ctx.prompt.transcript

    def test_existing_env_is_skipped(self, host, make_ctx):
        host.conda_envs.add("datasci")
        DataScienceStage(make_ctx(host)).run()
        assert not any("create" in c for c in host.executed)

    def test_conda_missing_after_cask(self, host, make_ctx):
        host.set_output([BREW, "install", "--cask"], "")
        with pytest.raises(SetupError, match="conda not found"):
            DataScienceStage(make_ctx(host)).run()


class TestWebPython:
    def test_provisions_latest_patch(self, host, make_ctx, settings):
        WebPythonStage(make_ctx(host)).run()
        pyenv = host.programs["pyenv"]
        assert host.executed == [
            [BREW, "install", "pyenv"],
            [pyenv, "install", "-s", "3.12.10"],
            [pyenv, "global", "3.12.10"],
            [pyenv, "exec", "pip", "install", "--upgrade", "pip"],
            [pyenv, "exec", "pip", "install", *settings.web_python.packages],
        ]
        profile = settings.profile_path.read_text()
        assert 'eval "$(pyenv init --path)"' in profile
        assert 'eval "$(pyenv init -)"' in profile

    def test_no_matching_release(self, host, make_ctx, settings):
        settings.web_python.python_series = "2.9"
        with pytest.raises(SetupError, match="no Python 2.9"):
            WebPythonStage(make_ctx(host)).run()

    def test_listing_fails(self, host, make_ctx):
        host.set_failure(["/opt/homebrew/bin/pyenv", "install", "--list"])
        with pytest.raises(ExternalCommandFailure):
            WebPythonStage(make_ctx(host)).run()


class TestLatestPatch:
    def test_numeric_order(self):
        assert latest_patch(PYENV_LISTING, "3.12") == "3.12.10"

    def test_ignores_dev_and_other_series(self):
        assert latest_patch("  3.12-dev\n  3.13.1\n", "3.12") is None

    def test_series_is_literal(self):
        assert latest_patch("  3.1x2.5\n  3.12.5\n", "3.12") == "3.12.5"


class TestWebJs:
    def test_provisions(self, host, make_ctx, settings, tmp_path):
        WebJsStage(make_ctx(host)).run()
        assert host.formulae == {"nvm"}
        assert host.node_lts
        assert host.npm_globals == {"yarn", "pnpm", "create-react-app", "vite"}
        assert (tmp_path / ".nvm").is_dir()

        profile = settings.profile_path.read_text()
        assert profile.count("NVM_DIR") == 1
        assert "nvm.sh" in profile

    def test_nvm_commands_source_nvm(self, host, make_ctx):
        WebJsStage(make_ctx(host)).run()
        install = host.executed[1]
        assert install[:2] == ["/bin/bash", "-c"]
        assert ". /opt/homebrew/opt/nvm/nvm.sh" in install[2]
        assert install[2].endswith("nvm install --lts")


# ── Idempotence ──────────────────────────────────────────────────────

STACK_STAGES = [AcademicStage, DataScienceStage, WebPythonStage, WebJsStage]


class TestIdempotence:
    @pytest.mark.parametrize("stage_cls", [PackageManagerStage, *STACK_STAGES])
    def test_twice_equals_once(self, stage_cls, make_ctx, settings):
        host = SimulatedHost(brew=stage_cls is not PackageManagerStage)

        stage_cls(make_ctx(host)).run()
        state_once = host.snapshot()
        profile_once = (
            settings.profile_path.read_text() if settings.profile_path.exists() else ""
        )

        stage_cls(make_ctx(host)).run()
        assert host.snapshot() == state_once
        profile_twice = (
            settings.profile_path.read_text() if settings.profile_path.exists() else ""
        )
        assert profile_twice == profile_once

    def test_toolchain_twice(self, make_ctx):
        host = SimulatedHost(toolchain=False)
        ToolchainStage(make_ctx(host, [""])).run()
        state_once = host.snapshot()
        result = ToolchainStage(make_ctx(host)).run()
        assert result.status == "skipped"
        assert host.snapshot() == state_once


class TestTools:
    def test_stack_tools_follow_settings(self, host, make_ctx):
        ctx = make_ctx(host)
        assert [t.name for t in AcademicStage(ctx).tools()][:3] == ["python", "gcc", "openjdk"]
        assert {t.mechanism for t in DataScienceStage(ctx).tools()} == {"cask", "conda"}
        assert {t.mechanism for t in WebPythonStage(ctx).tools()} == {"formula", "pip"}
        assert {t.mechanism for t in WebJsStage(ctx).tools()} == {"formula", "npm"}

    def test_prerequisites_have_no_tools(self, host, make_ctx):
        assert PowerCheckStage(make_ctx(host)).tools() == []

    def test_installs_follow_tools(self, host, make_ctx):
        class JustWget(AcademicStage):
            def tools(self):
                return [ToolSpec(name="wget", mechanism="formula")]

        JustWget(make_ctx(host)).run()
        assert host.executed == [[BREW, "install", "wget"]]

    def test_tool_names_by_mechanism(self, host, make_ctx):
        stage = WebJsStage(make_ctx(host))
        assert stage.tool_names("formula") == ["nvm"]
        assert stage.tool_names("npm") == ["yarn", "pnpm", "create-react-app", "vite"]
        assert stage.tool_names("cask") == []
