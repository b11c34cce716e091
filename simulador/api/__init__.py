"""HTTP routers: simulation, validation and admin listing."""
