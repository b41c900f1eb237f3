# tests/test_conversion_engine.py
"""
Conversion Engine Tests - Keypad Accumulation, Modifiers and Commit

Files that this module USES:
- trcalc.application.conversion_engine (via the session fixture)
- trcalc.domain.models (Modifier, CurrencyCode, MAX_AMOUNT)
- pytest (testing framework)
"""
import pytest

from trcalc.domain.models import MAX_AMOUNT, CurrencyCode, Modifier


def type_digits(engine, digits: str) -> None:
    for ch in digits:
        engine.append_digit(int(ch))


class TestDigitInput:
    def test_digits_accumulate(self, session):
        type_digits(session.engine, "1205")
        assert session.engine.amount == 1205

    def test_digit_over_cap_is_dropped(self, session):
        type_digits(session.engine, "999999999")
        assert session.engine.amount == MAX_AMOUNT
        session.engine.append_digit(9)
        assert session.engine.amount == MAX_AMOUNT

    def test_long_sequence_never_exceeds_cap(self, session):
        type_digits(session.engine, "12345678901234567890")
        assert session.engine.amount == 123456789
        assert session.engine.amount <= MAX_AMOUNT

    def test_invalid_digit_raises(self, session):
        with pytest.raises(ValueError):
            session.engine.append_digit(10)
        with pytest.raises(ValueError):
            session.engine.append_digit(-1)

    def test_backspace_drops_last_digit(self, session):
        type_digits(session.engine, "345")
        session.engine.backspace()
        assert session.engine.amount == 34

    def test_backspace_on_zero_then_digit(self, session):
        session.engine.backspace()
        assert session.engine.amount == 0
        session.engine.append_digit(7)
        assert session.engine.amount == 7

    def test_clear(self, session):
        type_digits(session.engine, "42")
        session.engine.clear()
        assert session.engine.amount == 0

    def test_quick_value_replaces_amount(self, session):
        type_digits(session.engine, "42")
        session.engine.select_quick_value(500)
        assert session.engine.amount == 500

    def test_out_of_range_quick_value_ignored(self, session):
        session.engine.select_quick_value(MAX_AMOUNT + 1)
        assert session.engine.amount == 0


class TestMultiplier:
    def test_positive_percent_multiplies(self, session):
        session.engine.select_quick_value(100)
        session.engine.apply_multiplier(Modifier("+KDV", 18))
        assert session.engine.amount == 118

    def test_negative_percent_divides(self, session):
        session.engine.select_quick_value(118)
        session.engine.apply_multiplier(Modifier("-KDV", -18))
        assert session.engine.amount == 100

    def test_rounds_half_up(self, session):
        session.engine.select_quick_value(5)
        session.engine.apply_multiplier(Modifier("+10", 10))
        # 5 * 1.1 = 5.5
        assert session.engine.amount == 6

    def test_zero_amount_is_noop(self, session):
        session.engine.apply_multiplier(Modifier("+KDV", 18))
        assert session.engine.amount == 0

    def test_does_not_write_history(self, session):
        session.engine.select_quick_value(100)
        session.engine.apply_multiplier(Modifier("+KDV", 18))
        assert len(session.history) == 0

    def test_result_capped(self, session):
        session.engine.select_quick_value(MAX_AMOUNT)
        session.engine.apply_multiplier(Modifier("+25", 25))
        assert session.engine.amount == MAX_AMOUNT


class TestDirection:
    def test_swap_twice_restores(self, session):
        session.engine.select_quick_value(250)
        original = session.engine.is_reversed
        session.engine.swap_direction()
        assert session.engine.is_reversed is not original
        assert session.engine.amount == 250
        session.engine.swap_direction()
        assert session.engine.is_reversed is original
        assert session.engine.amount == 250

    def test_swap_flips_currency_labels(self, session):
        assert session.engine.from_currency is CurrencyCode.USD
        assert session.engine.to_currency is CurrencyCode.TRY
        session.engine.swap_direction()
        assert session.engine.from_currency is CurrencyCode.TRY
        assert session.engine.to_currency is CurrencyCode.USD

    def test_swap_is_persisted_in_settings(self, session):
        session.engine.swap_direction()
        assert session.settings.settings.is_reversed is True


class TestCurrentConversion:
    def test_usd_to_try(self, session):
        session.engine.select_quick_value(100)
        view = session.engine.current_conversion()
        assert view.displayed_amount == 100
        assert view.converted_amount == 3450

    def test_try_to_usd(self, session):
        session.settings.set_reversed(True)
        session.engine.select_quick_value(3450)
        assert session.engine.current_conversion().converted_amount == 100

    def test_follows_target_currency(self, session):
        session.settings.set_target_currency(CurrencyCode.EUR)
        session.engine.select_quick_value(100)
        view = session.engine.current_conversion()
        assert view.to_currency is CurrencyCode.EUR
        assert view.converted_amount == 92

    def test_is_pure_read(self, session):
        session.engine.select_quick_value(100)
        session.engine.current_conversion()
        assert session.engine.amount == 100
        assert len(session.history) == 0

    def test_listeners_receive_views(self, session):
        views = []
        session.engine.subscribe(views.append)
        session.engine.append_digit(3)
        assert views[-1].displayed_amount == 3
        # 3 * 34.5 = 103.5 rounds up
        assert views[-1].converted_amount == 104


class TestCommitEquals:
    def test_zero_amount_is_noop(self, session):
        assert session.engine.commit_equals() is None
        assert len(session.history) == 0

    def test_records_entry_and_resets(self, session, clock):
        session.engine.select_quick_value(100)
        entry = session.engine.commit_equals()
        assert session.engine.amount == 0
        assert len(session.history) == 1
        assert session.history.latest == entry
        assert entry.input_amount == 100
        assert entry.output_amount == 3450
        assert entry.from_currency is CurrencyCode.USD
        assert entry.to_currency is CurrencyCode.TRY
        assert entry.rate_used == 34.5
        assert entry.modifier is None
        assert entry.timestamp == clock.now

    def test_with_modifier(self, session):
        session.engine.select_quick_value(100)
        entry = session.engine.commit_equals(Modifier("+KDV", 18))
        assert entry.input_amount == 118
        assert entry.output_amount == 4071
        assert entry.modifier == Modifier("+KDV", 18)

    def test_reversed_rate_used(self, session):
        session.engine.swap_direction()
        session.engine.select_quick_value(3450)
        entry = session.engine.commit_equals()
        assert entry.from_currency is CurrencyCode.TRY
        assert entry.to_currency is CurrencyCode.USD
        assert entry.rate_used == pytest.approx(1 / 34.5)
        assert entry.output_amount == 100

    def test_ids_are_unique(self, session):
        ids = set()
        for _ in range(20):
            session.engine.select_quick_value(10)
            ids.add(session.engine.commit_equals().id)
        assert len(ids) == 20

    def test_51_commits_keep_50_most_recent(self, session):
        for amount in range(1, 52):
            session.engine.select_quick_value(amount)
            session.engine.commit_equals()
        assert len(session.history) == 50
        inputs = [e.input_amount for e in session.history]
        assert inputs == list(range(51, 1, -1))
