"""
In-memory providers standing in for a hypervisor host
"""

from virtcap import utils_classname
from virtcap.errors import ConnectionFailure, NotFound
from virtcap.instance import Instance, InstanceFactory
from virtcap.providers import base
from virtcap.svpc_types import ResourceType


class FakeDomain(base.Domain):

    def __init__(self, name):
        self._name = name
        self.freed = False

    def name(self):
        return self._name

    def free(self):
        self.freed = True


class FakeConnection(base.Connection):

    def __init__(self, host, uri):
        self._host = host
        self._uri = uri
        self.closed = False

    @property
    def uri(self):
        return self._uri

    def close(self):
        self.closed = True

    def get_max_vcpus(self):
        return self._host.max_vcpus

    def get_version(self):
        if self._host.version is None:
            raise ConnectionFailure(self._uri,
                                    "Could not get hypervisor version")
        return self._host.version

    def get_capabilities(self):
        return self._host.capabilities

    def list_domains(self):
        domains = [FakeDomain(name) for name in self._host.domains]
        self._host.handed_out.extend(domains)
        return domains


class FakeHost(base.ConnectionProvider):
    """
    A hypervisor host, also acting as its own connection provider.

    :param domains: {domain name: {ResourceType: [(device, source), ...]}}
    :param pools: {pool id: capacity}
    :param disk_pools: {storage pool name: target path}
    """

    def __init__(self, max_vcpus=8, version=3001000,
                 capabilities="<capabilities><guest><os_type>hvm</os_type>"
                              "</guest></capabilities>",
                 domains=None, pools=None, disk_pools=None):
        self.max_vcpus = max_vcpus
        self.version = version
        self.capabilities = capabilities
        self.domains = domains or {}
        self.pools = pools or {}
        self.disk_pools = disk_pools or {}
        self.fail_connect = False
        self.opened = []
        self.handed_out = []

    def connect(self, classname):
        backend = utils_classname.backend_from_classname(classname)
        if self.fail_connect:
            raise ConnectionFailure(backend.prefix, "host is down")
        conn = FakeConnection(self, "%s:///fake" % backend.prefix.lower())
        self.opened.append(conn)
        return conn

    def all_closed(self):
        return all(conn.closed for conn in self.opened)

    def all_freed(self):
        return all(dom.freed for dom in self.handed_out)


class FakeDeviceProvider(base.DeviceProvider):

    def __init__(self, host, instances=None):
        self._host = host
        self._instances = instances or InstanceFactory()

    def _devices(self, dom_name, res_type):
        if dom_name not in self._host.domains:
            raise NotFound("Domain %s not found" % dom_name)
        return self._host.domains[dom_name].get(res_type, [])

    def settings_for_domain(self, conn, dom_name, res_type, refcn, namespace):
        settings = []
        for dev_name, _ in self._devices(dom_name, res_type):
            inst = self._instances.new_typed_instance(
                refcn, utils_classname.rasd_classname_from_type(res_type),
                namespace)
            inst.set_property("InstanceID", "%s/%s" % (dom_name, dev_name))
            inst.set_property("ResourceType", int(res_type))
            settings.append(inst)
        return settings

    def device_source(self, conn, dom_name, res_type, dev_name):
        for name, source in self._devices(dom_name, res_type):
            if name == dev_name:
                return source
        raise NotFound("No device %s in %s" % (dev_name, dom_name))


class FakePoolProvider(base.PoolProvider):

    def __init__(self, host):
        self._host = host

    def pool_by_id(self, conn, pool_id, refcn, namespace):
        if pool_id not in self._host.pools:
            return None
        res_type = utils_classname.res_type_from_pool_id(pool_id)
        inst = Instance(utils_classname.get_typed_class(
            refcn, utils_classname.pool_base_from_type(res_type)), namespace)
        inst.set_property("InstanceID", pool_id)
        capacity = self._host.pools[pool_id]
        if capacity is not None:
            inst.set_property("Capacity", capacity, "uint64")
        return inst

    def pool_by_name(self, ref, name):
        with self._host.connect(ref.classname) as conn:
            pool = self.pool_by_id(conn, name, ref.classname, ref.namespace)
        if pool is None:
            raise NotFound("No such instance (%s)" % name)
        return pool

    def disk_pool_for_path(self, conn, path):
        for name, pool_path in self._host.disk_pools.items():
            if path.startswith(pool_path.rstrip("/") + "/"):
                return name
        return None


def sample_host(**kwargs):
    """
    Two guests sharing a network and a storage pool, and a third one
    attached elsewhere
    """
    domains = {
        "guest1": {
            ResourceType.PROCESSOR: [("proc", None)],
            ResourceType.MEMORY: [("mem", None)],
            ResourceType.NETWORK: [("52:54:00:00:00:01", "default")],
            ResourceType.DISK: [("vda", "/var/lib/libvirt/images/g1.qcow2")],
        },
        "guest2": {
            ResourceType.PROCESSOR: [("proc", None)],
            ResourceType.MEMORY: [("mem", None)],
            ResourceType.NETWORK: [("52:54:00:00:00:02", "default"),
                                   ("52:54:00:00:00:03", "isolated")],
            ResourceType.DISK: [("vda", "/var/lib/libvirt/images/g2.qcow2"),
                                ("vdb", "/srv/data/g2-data.img")],
        },
        "guest3": {
            ResourceType.NETWORK: [("52:54:00:00:00:04", None)],
            ResourceType.DISK: [("hda", "/tmp/scratch.img")],
        },
    }
    pools = {
        "ProcessorPool/0": 16,
        "MemoryPool/0": 16777216,
        "NetworkPool/default": 0,
        "NetworkPool/isolated": 0,
        "DiskPool/default": 40960,
        "DiskPool/data": 1024,
    }
    disk_pools = {
        "default": "/var/lib/libvirt/images",
        "data": "/srv/data",
    }
    kwargs.setdefault("domains", domains)
    kwargs.setdefault("pools", pools)
    kwargs.setdefault("disk_pools", disk_pools)
    return FakeHost(**kwargs)
