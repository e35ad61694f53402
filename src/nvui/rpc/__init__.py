"""msgpack-RPC transport: values, messages, session and connections."""
