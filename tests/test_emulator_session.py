"""End-to-end tests of the client against the built-in projector emulator."""

import asyncio

import pytest

from pjlink_client import (
    ConnectionStatus,
    PJLinkClient,
    PJLinkClientConfig,
    SessionState,
    compute_auth_prefix,
    pjlink_connect,
)
from pjlink_client.emulator import PJLinkProjectorEmulator

NONCE = "0badcafe"


async def wait_for(predicate, timeout=3.0):
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        if loop.time() > deadline:
            raise AssertionError("Timed out waiting for condition")
        await asyncio.sleep(0.01)


def make_config(emulator, password="", **kwargs):
    timing = dict(poll_interval_secs=0.01, refresh_secs=60.0, idle_disconnect_secs=60.0)
    timing.update(kwargs)
    return PJLinkClientConfig(f"127.0.0.1:{emulator.port}", password, **timing)


@pytest.mark.asyncio
async def test_query_and_set_power():
    async with PJLinkProjectorEmulator(port=0) as emulator:
        async with PJLinkClient(config=make_config(emulator)) as client:
            client.request_command("%1POWR ?")
            await wait_for(lambda: client.get_status("%1POWR") == "0")
            assert client.power_state_str() == "Standby"
            assert client.toggle_power()
            client.request_command("%1POWR ?")
            await wait_for(lambda: client.get_status("%1POWR") == "1")
            assert client.power_state_str() == "On"
        assert emulator.commands[:3] == ["%1POWR ?", "%1POWR 1", "%1POWR ?"]
        assert emulator.connection_count == 1


@pytest.mark.asyncio
async def test_password_digest_on_every_command():
    async with PJLinkProjectorEmulator(password="secret", nonce=NONCE, port=0) as emulator:
        async with PJLinkClient(config=make_config(emulator, "secret")) as client:
            client.request_command("%1NAME ?")
            client.request_command("%1INPT ?")
            await wait_for(lambda: client.get_status("%1INPT") == "31")
            assert client.get_status("%1NAME") == "Emulated Projector"
        prefix = compute_auth_prefix(NONCE, "secret")
        assert emulator.received_lines[:2] == [prefix + "%1NAME ?", prefix + "%1INPT ?"]


@pytest.mark.asyncio
async def test_wrong_password_then_update_credentials():
    statuses = []
    async with PJLinkProjectorEmulator(password="secret", port=0) as emulator:
        client = PJLinkClient(
            config=make_config(emulator, "wrong"),
            on_connection_state_changed=lambda status, detail: statuses.append(status),
          )
        async with client:
            client.request_command("%1POWR ?")
            await wait_for(lambda: client.state == SessionState.AUTH_FAILED)
            assert statuses[-1] == ConnectionStatus.AUTH_ERROR
            assert client.get_status("%1POWR") is None

            client.request_command("%1POWR ?")
            await asyncio.sleep(0.05)
            assert client.state == SessionState.AUTH_FAILED
            assert emulator.connection_count == 1

            client.update_credentials("secret")
            client.request_command("%1POWR ?")
            await wait_for(lambda: client.get_status("%1POWR") == "0")
            assert emulator.connection_count == 2


@pytest.mark.asyncio
async def test_class2_projector():
    async with PJLinkProjectorEmulator(pjlink_class=2, port=0) as emulator:
        client = await PJLinkClient.create(config=make_config(emulator))
        async with client:
            await wait_for(lambda: client.get_status("%2RFIL") == "FLT-EMU")
            assert client.get_status("%1CLSS") == "2"
            assert client.get_status("%2SNUM") == "EMU0000001"
            assert client.store.class2_enabled

            client.refresh()
            await wait_for(lambda: client.get_status("%2INNM") == "DVI-D")

            client.freeze()
            client.request_command("%2FREZ ?")
            await wait_for(lambda: client.get_status("%2FREZ") == "1")
        assert emulator.commands.count("%2SNUM ?") == 1


@pytest.mark.asyncio
async def test_class1_projector_start():
    async with PJLinkProjectorEmulator(port=0) as emulator:
        client = await pjlink_connect(config=make_config(emulator))
        async with client:
            await wait_for(lambda: client.get_status("%1LAMP") == "1200 1")
            assert client.get_status("%1NAME") == "Emulated Projector"
            assert client.get_status("%1INST") == "11 12 31 32"
            assert not client.store.class2_enabled
        assert not any(c.startswith("%2") for c in emulator.commands)


@pytest.mark.asyncio
async def test_command_errors_leave_status_alone():
    async with PJLinkProjectorEmulator(port=0) as emulator:
        async with PJLinkClient(config=make_config(emulator)) as client:
            client.select_input("99")
            client.request_command("%1INPT ?")
            await wait_for(lambda: client.get_status("%1INPT") == "31")
            client.select_input("32")
            client.request_command("%1INPT ?")
            await wait_for(lambda: client.get_status("%1INPT") == "32")
        assert emulator.values["%1INPT"] == "32"


@pytest.mark.asyncio
async def test_silent_projector_idle_disconnect_and_reconnect():
    statuses = []
    async with PJLinkProjectorEmulator(silent=True, port=0) as emulator:
        client = PJLinkClient(
            config=make_config(emulator, idle_disconnect_secs=0.3),
            on_connection_state_changed=lambda status, detail: statuses.append(status),
          )
        async with client:
            client.request_command("%1POWR ?")
            client.request_command("%1INPT ?")
            await wait_for(lambda: ConnectionStatus.OK in statuses)
            await wait_for(lambda: client.state == SessionState.DISCONNECTED)
            assert statuses[-1] == ConnectionStatus.DISCONNECTED
            assert emulator.commands == ["%1POWR ?"]

            emulator.silent = False
            client.request_command("%1AVMT ?")
            await wait_for(lambda: client.get_status("%1AVMT") == "30")
            assert emulator.connection_count == 2


@pytest.mark.asyncio
async def test_projector_hangs_up():
    statuses = []
    async with PJLinkProjectorEmulator(port=0) as emulator:
        client = PJLinkClient(
            config=make_config(emulator),
            on_connection_state_changed=lambda status, detail: statuses.append(status),
          )
        async with client:
            client.request_command("%1POWR ?")
            await wait_for(lambda: client.get_status("%1POWR") == "0")
            emulator.disconnect_all()
            await wait_for(lambda: client.state == SessionState.DISCONNECTED)
            assert statuses[-1] == ConnectionStatus.DISCONNECTED
            assert client.get_status("%1POWR") == "0"

            emulator.values["%1POWR"] = "1"
            client.request_command("%1POWR ?")
            await wait_for(lambda: client.get_status("%1POWR") == "1")
            assert emulator.connection_count == 2


@pytest.mark.asyncio
async def test_refresh_after_quiet_period():
    async with PJLinkProjectorEmulator(port=0) as emulator:
        async with PJLinkClient(config=make_config(emulator, refresh_secs=0.1)) as client:
            client.request_command("%1POWR ?")
            await wait_for(lambda: client.get_status("%1POWR") == "0")
            emulator.values["%1POWR"] = "3"
            await wait_for(lambda: client.get_status("%1POWR") == "3")
            await wait_for(lambda: "%1LAMP ?" in emulator.commands)


@pytest.mark.asyncio
async def test_connection_refused():
    statuses = []
    async with PJLinkProjectorEmulator(port=0) as emulator:
        config = make_config(emulator)
    client = PJLinkClient(
        config=config,
        on_connection_state_changed=lambda status, detail: statuses.append(status),
      )
    async with client:
        client.request_command("%1POWR ?")
        await wait_for(lambda: ConnectionStatus.TRANSPORT_ERROR in statuses)
        assert client.state == SessionState.DISCONNECTED
        assert statuses[0] == ConnectionStatus.CONNECTING
