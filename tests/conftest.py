pytest_plugins = ["mp_grpc_metrics.testing.fixtures"]
