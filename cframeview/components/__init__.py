"""Terminal components for cframeview."""
