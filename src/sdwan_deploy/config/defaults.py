"""Default configuration values for the SD-WAN deployment orchestrator."""

# Playbooks, relative to the project root
DEPLOY_PLAYBOOK = "deploy_sdwan.yml"
VALIDATE_PLAYBOOK = "validate_sdwan.yml"
CONFIGURE_PLAYBOOK = "configure_sdwan.yml"
CLEANUP_PLAYBOOK = "cleanup_sdwan.yml"

INVENTORY_FILE = "inventory/hosts.yml"
DEPLOYMENT_VARS_FILE = "vars/deployment_config.yml"
HEALTH_CHECK_SCRIPT = "scripts/health_check.sh"

# Working directories, relative to the project root
LOG_DIR = "logs"
REPORT_DIR = "reports"
BACKUP_DIR = "backup"
STATE_DIR = ".state"

STATE_FILE_NAME = "deployment_state.json"
PID_FILE_NAME = "deployment.pid"

REQUIRED_COLLECTIONS: tuple[str, ...] = (
    "community.vmware",
    "cisco.ios",
    "ansible.netcommon",
)

# Seconds to wait between deployment and validation
SETTLE_INTERVAL = 60

VALIDATION_TAGS = "validation"
CLEANUP_CONFIRMATION = "DELETE"
DEFAULT_VMANAGE_HOST = "192.168.1.10"

RUN_ID_FORMAT = "%Y%m%d_%H%M%S"
