# Re-export tool modules so `from vault_advisor import tools; tools.vault_source...` works.
from . import http_tool
from . import vault_source
