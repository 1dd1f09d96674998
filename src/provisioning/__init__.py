"""Embedding model provisioning for the host application."""

# Import submodules directly, e.g. `from src.provisioning.provisioner import Provisioner`
