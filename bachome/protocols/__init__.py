"""
Network protocols used by the bridge.

Structure:
    bachome/protocols/
    ├── base_protocol.py            # Lifecycle shared by protocol wrappers
    └── bacnet/
        ├── types.py                # ObjectReference, ApplicationTag
        ├── bacpypes3_adapter.py    # Transport-only adapter (bacpypes3)
        └── bacnet_protocol.py      # Present-value read/write transport

Usage:
    adapter = Bacpypes3Adapter(local_address="192.168.1.10/24", device_id=599)
    bacnet = BACnetProtocol(adapter)
    await bacnet.connect()
    value = await bacnet.read_present_value("192.168.1.50", ObjectReference.parse("AV:15"))
"""
