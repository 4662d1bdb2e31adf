"""Device drivers. One subpackage per supported controller family."""
