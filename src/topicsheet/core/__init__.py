"""Sheet model, ordered sibling engine, mutation service and sync projection."""
