"""Generated artifacts — runtime-built tool executors, template source and
candidate templates proposed for existing signatures."""
