"""Status transition rules in permissive and strict mode."""

import pytest

from apps.common.constants import OrderStatus
from apps.common.exceptions import InvalidStatus, InvalidTransition, OrderFinalized
from apps.orders.state_machine import allowed_next, check_transition, default_message, parse_status

NON_TERMINAL = [s for s in OrderStatus if s not in OrderStatus.terminal()]


class TestPermissiveMode:
    @pytest.mark.parametrize("current", NON_TERMINAL)
    def test_any_non_terminal_order_can_be_cancelled(self, current):
        assert check_transition(current, "cancelled", strict=False) == OrderStatus.CANCELLED

    def test_steps_can_be_skipped(self):
        assert check_transition("placed", "delivered", strict=False) == OrderStatus.DELIVERED

    def test_steps_can_go_backwards(self):
        assert check_transition("ready", "preparing", strict=False) == OrderStatus.PREPARING

    def test_placed_is_never_re_entered(self):
        with pytest.raises(InvalidTransition):
            check_transition("confirmed", "placed", strict=False)

    def test_is_the_default(self, settings):
        settings.ORDER_STRICT_TRANSITIONS = False

        assert OrderStatus.OUT_FOR_DELIVERY in allowed_next("placed")


class TestTerminalStatuses:
    @pytest.mark.parametrize("current", OrderStatus.terminal())
    def test_nothing_leaves_a_terminal_status(self, current):
        assert allowed_next(current) == set()

        with pytest.raises(OrderFinalized) as exc:
            check_transition(current, "preparing")

        assert exc.value.context["current_status"] == current

    def test_finalized_is_reported_before_an_unknown_status(self):
        with pytest.raises(OrderFinalized):
            check_transition("delivered", "teleported")


class TestStatusParsing:
    def test_unknown_status(self):
        with pytest.raises(InvalidStatus) as exc:
            check_transition("placed", "teleported")

        assert exc.value.kind == "invalid_input"
        assert "out-for-delivery" in exc.value.context["allowed"]

    def test_parse_returns_the_enum(self):
        assert parse_status("picked-up") is OrderStatus.PICKED_UP


class TestStrictMode:
    @pytest.mark.parametrize(
        "current, following",
        [
            ("placed", "confirmed"),
            ("confirmed", "preparing"),
            ("preparing", "ready"),
            ("ready", "picked-up"),
            ("picked-up", "out-for-delivery"),
            ("out-for-delivery", "delivered"),
        ],
    )
    def test_forward_path_one_step_at_a_time(self, current, following):
        assert check_transition(current, following, strict=True) == following

    def test_skipping_a_step_is_rejected(self):
        with pytest.raises(InvalidTransition) as exc:
            check_transition("placed", "preparing", strict=True)

        assert exc.value.context == {"current_status": "placed", "requested_status": "preparing"}

    def test_going_back_is_rejected(self):
        with pytest.raises(InvalidTransition):
            check_transition("ready", "preparing", strict=True)

    @pytest.mark.parametrize("target", ["cancelled", "refunded"])
    def test_cancel_and_refund_stay_reachable(self, target):
        assert check_transition("out-for-delivery", target, strict=True) == target

    def test_enabled_through_settings(self, settings):
        settings.ORDER_STRICT_TRANSITIONS = True

        assert allowed_next("placed") == {OrderStatus.CONFIRMED, OrderStatus.CANCELLED, OrderStatus.REFUNDED}


def test_default_messages():
    assert default_message(OrderStatus.PLACED) == "Order placed successfully"
    assert default_message(OrderStatus.DELIVERED) == "Order delivered"
