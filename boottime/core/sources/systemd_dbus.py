"""Boot milestones read from the systemd manager over D-Bus.

The durations are derived exactly the way ``systemd-analyze time`` derives
them from the same properties, so both methods agree for a given boot.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Any, Protocol

from dbus_fast import BusType, Message, MessageType, Variant
from dbus_fast.aio import MessageBus
from dbus_fast.errors import AuthError, DBusError, InvalidAddressError

from boottime.core.exceptions import IPCConnectionError, NotReadyError
from boottime.core.logging import bind
from boottime.core.models import ZERO, RetrievalMethod, SourceRecord, usec

from .base import BootTimeSource

SYSTEMD_DESTINATION = "org.freedesktop.systemd1"
SYSTEMD_OBJECT_PATH = "/org/freedesktop/systemd1"
SYSTEMD_MANAGER_INTERFACE = "org.freedesktop.systemd1.Manager"
PROPERTIES_INTERFACE = "org.freedesktop.DBus.Properties"

FIRMWARE_TIMESTAMP = "FirmwareTimestampMonotonic"
LOADER_TIMESTAMP = "LoaderTimestampMonotonic"
INITRD_TIMESTAMP = "InitRDTimestampMonotonic"
USERSPACE_TIMESTAMP = "UserspaceTimestampMonotonic"
FINISH_TIMESTAMP = "FinishTimestampMonotonic"
TIMESTAMP_PROPERTIES = (
    FIRMWARE_TIMESTAMP,
    LOADER_TIMESTAMP,
    INITRD_TIMESTAMP,
    USERSPACE_TIMESTAMP,
    FINISH_TIMESTAMP,
)

_METHOD = RetrievalMethod.SYSTEMD_DBUS


class PropertyBus(Protocol):
    """The subset of :class:`dbus_fast.aio.MessageBus` used by the reader."""

    async def call(self, msg: Message) -> Message | None: ...

    def disconnect(self) -> None: ...


BusFactory = Callable[[], Awaitable[PropertyBus]]


async def connect_system_bus() -> PropertyBus:
    return await MessageBus(bus_type=BusType.SYSTEM).connect()


def _span(later: int, earlier: int) -> int:
    # unsigned subtraction: a negative result means "unavailable"
    if later == 0 or earlier == 0 or later < earlier:
        return 0
    return later - earlier


def compute_systemd_boot_times(
    firmware: int,
    loader: int,
    initrd: int,
    userspace: int,
    finish: int,
) -> SourceRecord:
    """Derive stage durations from monotonic milestone timestamps (µs).

    Raises:
        NotReadyError: ``finish`` is zero, boot has not completed.
    """

    if finish == 0:
        raise NotReadyError("bootup is not yet finished", _METHOD)

    kernel_done = initrd if initrd > 0 else userspace

    total = ZERO
    if firmware > 0 and finish > 0:
        # TODO: confirm against a reference boot trace; systemd reports
        # firmware + finish here while every other stage is a difference.
        total = usec(firmware + finish)

    return SourceRecord(
        firmware=usec(_span(firmware, loader)),
        loader=usec(loader) if loader > 0 else ZERO,
        kernel=usec(kernel_done),
        initrd=usec(_span(userspace, initrd)),
        userspace=usec(_span(finish, userspace)),
        total=total,
    )


class SystemdDBusSource(BootTimeSource):
    """Query systemd's monotonic boot timestamps over the system bus."""

    method = _METHOD

    def __init__(self, bus_factory: BusFactory | None = None) -> None:
        self._bus_factory = bus_factory or connect_system_bus

    async def retrieve(self) -> SourceRecord:
        log = bind(method=self.method.value)
        try:
            bus = await self._bus_factory()
        except (OSError, AuthError, InvalidAddressError, DBusError) as exc:
            raise IPCConnectionError(f"failed to connect to system bus: {exc}", self.method) from exc

        try:
            timestamps = {name: await self._get_timestamp(bus, name) for name in TIMESTAMP_PROPERTIES}
        finally:
            bus.disconnect()

        log.debug(f"systemd timestamps: {timestamps}")
        return compute_systemd_boot_times(
            firmware=timestamps[FIRMWARE_TIMESTAMP],
            loader=timestamps[LOADER_TIMESTAMP],
            initrd=timestamps[INITRD_TIMESTAMP],
            userspace=timestamps[USERSPACE_TIMESTAMP],
            finish=timestamps[FINISH_TIMESTAMP],
        )

    async def _get_timestamp(self, bus: PropertyBus, name: str) -> int:
        """Return a uint64 manager property, 0 when it cannot be read."""
        log = bind(method=self.method.value, property=name)
        message = Message(
            destination=SYSTEMD_DESTINATION,
            path=SYSTEMD_OBJECT_PATH,
            interface=PROPERTIES_INTERFACE,
            member="Get",
            signature="ss",
            body=[SYSTEMD_MANAGER_INTERFACE, name],
        )
        try:
            reply = await bus.call(message)
        except (OSError, DBusError, EOFError) as exc:
            log.debug(f"property call failed: {exc}")
            return 0

        if reply is None or reply.message_type == MessageType.ERROR:
            log.debug(f"property unavailable: {getattr(reply, 'error_name', None)}")
            return 0
        return _uint64_value(reply.body)


def _uint64_value(body: list[Any]) -> int:
    if not body:
        return 0
    value = body[0]
    if not isinstance(value, Variant) or value.signature != "t":
        return 0
    return int(value.value)


__all__ = [
    "BusFactory",
    "PropertyBus",
    "SystemdDBusSource",
    "TIMESTAMP_PROPERTIES",
    "compute_systemd_boot_times",
    "connect_system_bus",
]
