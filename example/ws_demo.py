import asyncio
import sys

from sfu_ws import ClientSettings, HandshakeBuilder, LifecycleKind, SfuClient, configure_logging

async def main(host=None):
    # Joins room 1 as user 1 on a running forwarding unit.
    # Start a second copy with another user id to see frames flow both ways.
    # SFU_WS_HOST, SFU_WS_LOG_LEVEL etc. apply; a host argument overrides
    settings = ClientSettings.from_env()
    configure_logging(settings=settings)
    closed = asyncio.Event()

    def on_lifecycle(event):
        print("lifecycle:", event.kind, event.detail or "")
        if event.kind == LifecycleKind.CLOSE:
            closed.set()

    A = SfuClient(host, settings=settings, on_frame=lambda f: print("frame for", f.recipient_id, f.payload),
                  on_lifecycle=on_lifecycle)
    A.on_object(lambda obj, frame: print("object from", frame.recipient_id, obj))

    desc = (HandshakeBuilder()
            .room(1)
            .user(1, token=0)
            .stream("demo")
            .shared_key("")
            .build())
    A.join(desc)

    await asyncio.sleep(0.5)
    A.broadcast("hello group")
    A.send("hello user 2", 2)
    A.send_object({"type": "note", "text": "structured"}, 2)

    await asyncio.sleep(0.5)
    A.close()
    await closed.wait()

if __name__ == "__main__":
    asyncio.run(main(*sys.argv[1:2]))
