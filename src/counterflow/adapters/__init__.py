"""
Infrastructure Adapters

Adapters that connect the engine to external systems:
- datastar: Server-Sent Event formatting for Datastar clients
- fasthtml: FastHTML routes and the counter page
"""
