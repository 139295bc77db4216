"""
Tests for the menu controller — static lookup, no retries.
"""

import pytest

from devsetup.core.errors import InvalidSelection
from devsetup.core.menu import (
    MAIN_MENU,
    STACK_STAGES,
    MenuController,
    StackChoice,
    check_tables,
)
from devsetup.core.prompt import ScriptedPrompt
from devsetup.core.stages import AcademicStage, DataScienceStage, WebJsStage, WebPythonStage


class TestSelect:
    @pytest.mark.parametrize(
        "answers,expected",
        [
            (["1"], StackChoice.ACADEMIC),
            (["2"], StackChoice.DATA_SCIENCE),
            (["3", "a"], StackChoice.WEB_PYTHON),
            (["3", "b"], StackChoice.WEB_JS),
            (["3", "B"], StackChoice.WEB_JS),
            ([" 2 "], StackChoice.DATA_SCIENCE),
        ],
    )
    def test_valid(self, answers, expected):
        assert MenuController(ScriptedPrompt(answers)).select() == expected

    @pytest.mark.parametrize("answer", ["0", "4", "", "a", "one", "12"])
    def test_invalid_main_choice(self, answer):
        prompt = ScriptedPrompt([answer, "1"])
        with pytest.raises(InvalidSelection):
            MenuController(prompt).select()
        assert len(prompt.questions) == 1

    @pytest.mark.parametrize("answer", ["c", "1", "", "ab"])
    def test_invalid_sub_choice(self, answer):
        prompt = ScriptedPrompt(["3", answer, "a"])
        with pytest.raises(InvalidSelection):
            MenuController(prompt).select()
        assert len(prompt.questions) == 2

    def test_prompts_shown(self):
        prompt = ScriptedPrompt(["3", "a"])
        MenuController(prompt).select()
        assert prompt.questions == ["Enter 1-3:", "Enter a/b:"]
        assert "  1) Academic / General-Learning" in prompt.transcript
        assert "  b) JavaScript (Node / React / Vite etc.)" in prompt.transcript


class TestLookupTable:
    def test_every_choice_has_a_stage(self):
        assert set(STACK_STAGES) == set(StackChoice)

    def test_stage_for(self):
        menu = MenuController(ScriptedPrompt())
        assert menu.stage_for(StackChoice.ACADEMIC) is AcademicStage
        assert menu.stage_for(StackChoice.DATA_SCIENCE) is DataScienceStage
        assert menu.stage_for(StackChoice.WEB_PYTHON) is WebPythonStage
        assert menu.stage_for(StackChoice.WEB_JS) is WebJsStage

    def test_web_dev_has_submenu(self):
        assert MAIN_MENU["3"].choice is None
        assert set(MAIN_MENU["3"].submenu) == {"a", "b"}

    def test_shipped_tables_pass_check(self):
        check_tables(STACK_STAGES, MAIN_MENU)

    def test_stack_without_stage_is_rejected(self):
        stages = {k: v for k, v in STACK_STAGES.items() if k is not StackChoice.WEB_JS}
        with pytest.raises(RuntimeError, match="web-js"):
            check_tables(stages, MAIN_MENU)

    def test_stack_without_menu_entry_is_rejected(self):
        menu = {k: v for k, v in MAIN_MENU.items() if k != "2"}
        with pytest.raises(RuntimeError, match="data-science"):
            check_tables(STACK_STAGES, menu)
