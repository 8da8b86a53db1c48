"""Dashboard application state: immutable snapshots, actions and the controller."""
