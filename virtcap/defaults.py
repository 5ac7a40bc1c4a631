"""
Policy constants used when no configuration overrides them
"""

NAMESPACE = "root/virt"

# Connection URI per class-name prefix
URIS = {
    "Xen": "xen:///",
    "KVM": "qemu:///system",
    "LXC": "lxc:///",
}

# Memory bounds, in KiloBytes
MEM_MIN = 64 << 10
MEM_DEF = 256 << 10
MEM_INC = 1 << 10
MAX_MEM = 1 << 30

# Processor bounds, in Processors
PROC_MIN = 1
PROC_DEF = 1
PROC_INC = 1

# Network interface counts
NET_MIN = 0
NET_DEF = 1
NET_INC = 1
KVM_MAX_NICS = 8
XEN_MAX_NICS = 8
XEN_OLD_MAX_NICS = 4
# Xen 3.1.0, encoded as major * 1000000 + minor * 1000 + release
XEN_NIC_VERSION_CUTOFF = 3001000

# Disk bounds, in MegaBytes
DISK_MIN = 2000
DISK_DEF = 5000
DISK_INC = 250

# Default virtual system profiles
XEN_PV_BOOTLOADER = "/usr/bin/pygrub"
FV_BOOT_DEVICE = "hda"
LXC_INIT_PATH = "/sbin/init"

__all__ = ["NAMESPACE", "URIS", "MAX_MEM", "KVM_MAX_NICS", "XEN_MAX_NICS",
           "XEN_NIC_VERSION_CUTOFF"]
