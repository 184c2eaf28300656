"""
Entry point for the Azure RBAC Assignment Tool package.
Allows running the CLI as: python -m azure_rbac_assignment_tool
"""

from .cli import main

if __name__ == "__main__":
    main()
