"""Host platform contract — Orders, locale, hooks, and autosave state."""
