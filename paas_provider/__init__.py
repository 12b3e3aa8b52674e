"""
PaaS Provider - service reconciliation core

Maps declarative PaaS service configuration to control-plane API requests and
back, and drives long-running create, update and delete operations to a
terminal state.
"""

__version__ = "0.1.0"
__author__ = "PaaS Provider"
