"""Configuration defaults and loading for the deployment orchestrator.

Main components:
- defaults: playbook names, directory layout and fixed constants
- loader.load_config: build the run configuration from env and CLI values
- loader.load_deployment_vars: read ``vars/deployment_config.yml``
"""
