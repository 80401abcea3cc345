"""taskflow - task and category stores with local and PocketBase persistence."""
