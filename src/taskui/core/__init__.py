"""
Core of the app: ports, input intents, the text input buffer and the controller.

Nothing in here touches the terminal or SQLite directly.
"""
