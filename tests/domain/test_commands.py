"""Tests for domain/commands.py (text and callback grammar)."""

import pytest

from pumpbridge.domain.commands import (
    BUTTON_ROWS,
    CALLBACKS,
    COMMAND_SPECS,
    COMMANDS,
    TEXT_COMMANDS,
    CommandSpec,
    build_menu,
    parse,
    parse_argument,
    parse_callback,
)
from pumpbridge.domain.models import (
    PumpOff,
    PumpOn,
    SetInterval,
    ShowMenu,
    Status,
    Unknown,
    ValveOff,
    ValveOn,
)


class TestParse:
    def test_start_shows_menu(self):
        assert parse("/start") == ShowMenu()

    def test_commands_without_argument(self):
        assert parse("/pump_on") == PumpOn()
        assert parse("/pump_off") == PumpOff()
        assert parse("/status") == Status()
        assert parse("/valve_on") == ValveOn()
        assert parse("/valve_off") == ValveOff()

    def test_pump_on_minutes(self):
        assert parse("/pump_on 60") == PumpOn(duration_minutes=60)

    def test_valve_on_seconds(self):
        assert parse("/valve_on 45") == ValveOn(duration_seconds=45)

    def test_extra_whitespace(self):
        assert parse("  /pump_on\t  15  ") == PumpOn(duration_minutes=15)

    @pytest.mark.parametrize("arg", [
        "abc", "0", "-5", "1.5", "6_0", "٣", "99999999999999999999999", str(2**63),
    ])
    def test_invalid_argument_dropped(self, arg):
        assert parse(f"/pump_on {arg}") == parse("/pump_on")
        assert parse(f"/valve_on {arg}") == parse("/valve_on")

    def test_argument_ignored_for_plain_command(self):
        assert parse("/pump_off 10") == PumpOff()

    def test_third_token_ignored(self):
        assert parse("/pump_on 5 extra") == PumpOn(duration_minutes=5)

    def test_unknown_keyword(self):
        assert parse("/reboot now") == Unknown(raw_text="/reboot now")

    def test_case_sensitive(self):
        assert isinstance(parse("/PUMP_ON"), Unknown)

    def test_prefix_required(self):
        assert parse("pump_on 60") == Unknown(raw_text="pump_on 60")

    def test_empty_text(self):
        assert parse("") == Unknown(raw_text="")
        assert parse("   ") == Unknown(raw_text="   ")

    def test_set_interval_not_a_text_command(self):
        assert isinstance(parse("/set_interval 5"), Unknown)


class TestParseArgument:
    def test_positive(self):
        assert parse_argument("42") == 42

    def test_leading_plus(self):
        assert parse_argument("+7") == 7

    def test_rejects(self):
        assert parse_argument("0") is None
        assert parse_argument("-1") is None
        assert parse_argument("ten") is None
        assert parse_argument("") is None

    def test_int64_bound(self):
        assert parse_argument(str(2**63 - 1)) == 2**63 - 1
        assert parse_argument(str(2**63)) is None
        assert parse_argument("9" * 5000) is None


class TestParseCallback:
    @pytest.mark.parametrize("callback_id,expected", [
        ("pump_on", PumpOn()),
        ("pump_on_60", PumpOn(duration_minutes=60)),
        ("pump_on_120", PumpOn(duration_minutes=120)),
        ("pump_off", PumpOff()),
        ("valve_on_60", ValveOn(duration_seconds=60)),
        ("valve_off", ValveOff()),
        ("plant_interval_1", SetInterval(minutes=1)),
        ("plant_interval_5", SetInterval(minutes=5)),
        ("plant_interval_30", SetInterval(minutes=30)),
        ("status", Status()),
    ])
    def test_known_callbacks(self, callback_id, expected):
        assert parse_callback(callback_id) == expected

    def test_unknown_callback(self):
        assert parse_callback("self_destruct") == Unknown(raw_text="self_destruct")

    def test_every_button_resolves(self):
        for callback_id in CALLBACKS:
            assert not isinstance(parse_callback(callback_id), Unknown)


class TestRegistry:
    def test_buttons_target_registered_commands(self):
        for row in BUTTON_ROWS:
            for button in row:
                assert button.command in COMMANDS

    def test_text_surface(self):
        assert set(TEXT_COMMANDS) == {
            "/start", "/pump_on", "/pump_off", "/status", "/valve_on", "/valve_off",
        }

    def test_names_unique(self):
        names = [spec.name for spec in COMMAND_SPECS]
        assert len(names) == len(set(names))

    def test_required_parameter_without_argument(self):
        spec = CommandSpec("set_interval", SetInterval, parameter="minutes", required=True)
        assert spec.build() == Unknown(raw_text="set_interval")
        assert spec.build(3) == SetInterval(minutes=3)

    def test_intents_are_immutable(self):
        intent = PumpOn(duration_minutes=1)
        with pytest.raises(AttributeError):
            intent.duration_minutes = 2


class TestBuildMenu:
    def test_inline_menu_matches_buttons(self):
        menu = build_menu("inline")
        assert menu.inline is True
        assert [[b.value for b in row] for row in menu.rows] == [
            [b.callback_id for b in row] for row in BUTTON_ROWS
        ]

    def test_reply_menu_uses_text_commands(self):
        menu = build_menu("reply")
        assert menu.inline is False
        values = [b.value for row in menu.rows for b in row]
        assert "/start" not in values
        assert set(values) == {"/pump_on", "/pump_off", "/status", "/valve_on", "/valve_off"}
        for value in values:
            assert not isinstance(parse(value), Unknown)

    def test_unknown_style(self):
        with pytest.raises(ValueError):
            build_menu("carousel")
