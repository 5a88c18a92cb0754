"""Domain layer: repository protocols the services depend on."""
