"""Development simulator of a counter device."""
