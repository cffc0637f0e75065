"""End-to-end walkthrough: create a hook, receive its events live, clean up.

Usage:
    # Requires a Hooker instance and an access token
    HOOKER_BASE_URL=http://localhost:3000 HOOKER_TOKEN=... python examples/live_events.py
"""

import asyncio
import uuid

import httpx

from hooker import ApiClient, ApiClientConfig, HookerMQTTClient, MQTTClientConfig, topics
from hooker.contracts.v1 import EventDto, HookCreateBody
from hooker.runtime.logging import configure_logging


async def main() -> None:
    logger = configure_logging("INFO", name="hooker.example")

    async with ApiClient(config=ApiClientConfig.from_env()) as api:
        async with HookerMQTTClient(api, config=MQTTClientConfig.from_env()) as mqtt:
            logger.info("Connected to MQTT broker")

            hook = await api.create_hook(HookCreateBody(id=str(uuid.uuid4())))
            logger.info("Created hook", extra={"hook_id": hook.id, "url": hook.url})

            received: asyncio.Future[EventDto] = asyncio.get_running_loop().create_future()

            def on_event(event: EventDto) -> None:
                if not received.done():
                    received.set_result(event)

            sub = await mqtt.subscribe(topics.hook_events(hook.id), on_event)

            async with httpx.AsyncClient() as http:
                await http.post(hook.url, json={"test": "Hello world from the example"})
            logger.info("Sent test webhook to %s", hook.url)

            event = await asyncio.wait_for(received, timeout=30)
            logger.info("Received event via MQTT: %s", event.body)

            sub.cancel()
            await api.delete_hook(hook.id)
            logger.info("Deleted hook %s", hook.id)


if __name__ == "__main__":
    asyncio.run(main())
