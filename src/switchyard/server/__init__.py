"""Server pipeline: ASGI translation, dispatch, error handling and the pounce runner."""
