"""Web API for examdesk."""
