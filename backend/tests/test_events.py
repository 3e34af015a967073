"""
Tests for Redis event publishing and floor event dispatch.
"""

import json
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from shared.config.constants import LineItemStatus, OrderStatus, TableStatus
from shared.config.settings import settings
from shared.infrastructure.events import (
    ITEM_STATUS_CHANGED,
    MAX_EVENT_SIZE,
    ORDER_CREATED,
    ORDER_STATUS_CHANGED,
    STOCK_LOW,
    Event,
    channel_admin,
    channel_kitchen,
    channel_waiters,
    publish_event,
    publish_item_event,
    publish_order_event,
    publish_stock_alert,
    publish_table_event,
)
from rest_api.models import LineItem, Order, Product, Table
from rest_api.services.events.floor_events import (
    _publish_order,
    schedule_item_event,
    schedule_order_event,
    schedule_stock_alerts,
    schedule_table_event,
)


def _channels(mock_redis) -> list[str]:
    return [c.args[0] for c in mock_redis.publish.call_args_list]


def _payloads(mock_redis) -> list[dict]:
    return [json.loads(c.args[1]) for c in mock_redis.publish.call_args_list]


class TestEventSchema:
    def test_round_trip(self):
        event = Event(type=ORDER_CREATED, table_id=3, entity={"order_id": 1})
        restored = Event.from_json(event.to_json())

        assert restored.type == ORDER_CREATED
        assert restored.table_id == 3
        assert restored.entity == {"order_id": 1}
        assert restored.ts is not None

    def test_unknown_type_rejected(self):
        with pytest.raises(ValueError):
            Event(type="SOMETHING_ELSE")

    def test_invalid_table_id_rejected(self):
        with pytest.raises(ValueError):
            Event(type=ORDER_CREATED, table_id=0)


class TestPublishEvent:
    @pytest.mark.asyncio
    async def test_publishes_json(self):
        mock_redis = AsyncMock()
        mock_redis.publish.return_value = 2

        receivers = await publish_event(
            mock_redis, channel_kitchen(), Event(type=ORDER_CREATED, table_id=1)
        )

        assert receivers == 2
        channel, payload = mock_redis.publish.call_args.args
        assert channel == "restaurant:kitchen"
        assert json.loads(payload)["type"] == ORDER_CREATED

    @pytest.mark.asyncio
    async def test_retries_then_succeeds(self):
        mock_redis = AsyncMock()
        mock_redis.publish.side_effect = [ConnectionError("down"), 1]

        with patch.object(settings, "redis_publish_retry_delay", 0):
            receivers = await publish_event(
                mock_redis, channel_admin(), Event(type=STOCK_LOW)
            )

        assert receivers == 1
        assert mock_redis.publish.call_count == 2

    @pytest.mark.asyncio
    async def test_raises_after_all_retries(self):
        mock_redis = AsyncMock()
        mock_redis.publish.side_effect = ConnectionError("down")

        with patch.object(settings, "redis_publish_retry_delay", 0), \
             patch.object(settings, "redis_publish_max_retries", 3):
            with pytest.raises(ConnectionError):
                await publish_event(mock_redis, channel_admin(), Event(type=STOCK_LOW))

        assert mock_redis.publish.call_count == 3

    @pytest.mark.asyncio
    async def test_oversized_event_rejected_before_publish(self):
        mock_redis = AsyncMock()
        event = Event(type=ORDER_CREATED, entity={"notes": "x" * (MAX_EVENT_SIZE + 1)})

        with pytest.raises(ValueError):
            await publish_event(mock_redis, channel_admin(), event)

        mock_redis.publish.assert_not_called()


class TestDomainPublishers:
    @pytest.mark.asyncio
    async def test_new_order_reaches_kitchen_waiters_and_admin(self):
        mock_redis = AsyncMock()

        await publish_order_event(
            mock_redis, ORDER_CREATED, order_id=7, table_id=3, order_status="pending", total_cents=3000
        )

        assert _channels(mock_redis) == [channel_kitchen(), channel_waiters(), channel_admin()]
        payload = _payloads(mock_redis)[0]
        assert payload["entity"] == {"order_id": 7, "status": "pending", "total_cents": 3000}
        assert payload["table_id"] == 3

    @pytest.mark.asyncio
    async def test_delivery_does_not_reach_kitchen(self):
        mock_redis = AsyncMock()

        await publish_order_event(
            mock_redis, ORDER_STATUS_CHANGED, order_id=7, table_id=3, order_status="delivered"
        )

        assert channel_kitchen() not in _channels(mock_redis)

    @pytest.mark.asyncio
    async def test_cancellation_reaches_kitchen(self):
        mock_redis = AsyncMock()

        await publish_order_event(
            mock_redis, ORDER_STATUS_CHANGED, order_id=7, table_id=3, order_status="cancelled"
        )

        assert channel_kitchen() in _channels(mock_redis)

    @pytest.mark.asyncio
    async def test_item_event(self):
        mock_redis = AsyncMock()

        await publish_item_event(
            mock_redis, order_id=7, line_item_id=21, table_id=3, item_status="ready",
            actor_user_id=3, actor_role="cook",
        )

        assert _channels(mock_redis) == [channel_kitchen(), channel_waiters()]
        payload = _payloads(mock_redis)[0]
        assert payload["type"] == ITEM_STATUS_CHANGED
        assert payload["actor"] == {"user_id": 3, "role": "cook"}

    @pytest.mark.asyncio
    async def test_table_event(self):
        mock_redis = AsyncMock()

        await publish_table_event(
            mock_redis, table_id=3, table_number=3, table_status="free", assigned_staff_id=None
        )

        assert _channels(mock_redis) == [channel_waiters(), channel_admin()]

    @pytest.mark.asyncio
    async def test_stock_alert_goes_to_admin(self):
        mock_redis = AsyncMock()

        await publish_stock_alert(
            mock_redis, product_id=12, product_name="Pizza", stock_actual=3, stock_minimo=5
        )

        assert _channels(mock_redis) == [channel_admin()]
        assert _payloads(mock_redis)[0]["entity"]["name"] == "Pizza"


class TestFloorEventDispatch:
    def test_nothing_scheduled_when_events_disabled(self):
        mock_bg_tasks = MagicMock()
        order = Order(id=1, table_id=3, status=OrderStatus.PENDING, total_cents=0)

        with patch.object(settings, "events_enabled", False):
            schedule_order_event(mock_bg_tasks, order, created=True)

        mock_bg_tasks.add_task.assert_not_called()

    def test_order_event_scheduled(self):
        mock_bg_tasks = MagicMock()
        order = Order(id=1, table_id=3, status=OrderStatus.READY, total_cents=4500)

        with patch.object(settings, "events_enabled", True):
            schedule_order_event(mock_bg_tasks, order, actor_user_id=2, actor_role="waiter")

        mock_bg_tasks.add_task.assert_called_once()
        kwargs = mock_bg_tasks.add_task.call_args.kwargs
        assert kwargs["event_type"] == ORDER_STATUS_CHANGED
        assert kwargs["order_status"] == "ready"
        assert kwargs["total_cents"] == 4500

    def test_item_and_table_events_scheduled(self):
        mock_bg_tasks = MagicMock()
        item = LineItem(id=21, order_id=1, status=LineItemStatus.IN_PREPARATION)
        table = Table(id=3, number=3, status=TableStatus.OCCUPIED, assigned_staff_id=2)

        with patch.object(settings, "events_enabled", True):
            schedule_item_event(mock_bg_tasks, item, table_id=3)
            schedule_table_event(mock_bg_tasks, table)

        assert mock_bg_tasks.add_task.call_count == 2
        item_kwargs = mock_bg_tasks.add_task.call_args_list[0].kwargs
        table_kwargs = mock_bg_tasks.add_task.call_args_list[1].kwargs
        assert item_kwargs["item_status"] == "in_preparation"
        assert table_kwargs["table_status"] == "occupied"
        assert table_kwargs["assigned_staff_id"] == 2

    def test_stock_alerts_only_for_low_products_once_each(self):
        mock_bg_tasks = MagicMock()
        low = Product(id=12, name="Pizza", stock_actual=3, stock_minimo=5)
        ok = Product(id=10, name="Hamburguesa", stock_actual=18, stock_minimo=5)

        with patch.object(settings, "events_enabled", True):
            schedule_stock_alerts(mock_bg_tasks, [low, ok, low])

        mock_bg_tasks.add_task.assert_called_once()
        assert mock_bg_tasks.add_task.call_args.kwargs["product_id"] == 12

    @pytest.mark.asyncio
    async def test_publish_failure_is_logged_not_raised(self):
        with patch("rest_api.services.events.floor_events.get_redis_client") as mock_get_redis, \
             patch("rest_api.services.events.floor_events.logger") as mock_logger:
            mock_get_redis.side_effect = Exception("Redis connection failed")

            await _publish_order(
                event_type=ORDER_CREATED,
                order_id=1,
                table_id=3,
                order_status="pending",
                total_cents=0,
                actor_user_id=None,
                actor_role=None,
            )

            mock_logger.error.assert_called_once()
            assert "Failed to publish order event" in mock_logger.error.call_args[0][0]
