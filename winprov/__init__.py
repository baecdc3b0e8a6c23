"""Windows workstation provisioning helpers.

- Chocolatey package installs with a checksum-relaxed retry
- Controlled folder access switched off only for the install run
- WSUS definition-update approval per target group
- Centralized logging
"""

__all__ = []
