#!/usr/bin/python
import os
import sys
import unittest

# simple magic for using scripts within a source tree
basedir = os.path.dirname(os.path.dirname(os.path.dirname(
    os.path.abspath(__file__))))
if os.path.isdir(os.path.join(basedir, 'virtcap')):
    sys.path.append(basedir)

from virtcap import utils_classname
from virtcap.errors import InvalidIdentifier
from virtcap.svpc_types import Backend, ResourceType


class TestClassNames(unittest.TestCase):

    def test_prefix_and_base(self):
        self.assertEqual(utils_classname.class_prefix_name("KVM_DiskPool"),
                         "KVM")
        self.assertEqual(utils_classname.class_base_name("KVM_DiskPool"),
                         "DiskPool")
        self.assertIsNone(utils_classname.class_prefix_name("DiskPool"))
        self.assertIsNone(utils_classname.class_prefix_name("_DiskPool"))
        self.assertIsNone(utils_classname.class_prefix_name(None))

    def test_backend(self):
        self.assertEqual(utils_classname.backend_from_classname("Xen_Foo"),
                         Backend.XEN)
        self.assertEqual(utils_classname.backend_from_classname("LXC_Foo"),
                         Backend.LXC)
        self.assertRaises(InvalidIdentifier,
                          utils_classname.backend_from_classname, "CIM_Foo")
        self.assertRaises(InvalidIdentifier,
                          utils_classname.backend_from_classname, "Foo")

    def test_typed_class(self):
        self.assertEqual(utils_classname.get_typed_class(
            "Xen_AllocationCapabilities", "DiskPool"), "Xen_DiskPool")
        self.assertRaises(InvalidIdentifier, utils_classname.get_typed_class,
                          "DiskPool", "MemoryPool")

    def test_rasd_classes(self):
        self.assertEqual(utils_classname.rasd_type_from_classname(
            "KVM_NetResourceAllocationSettingData"), ResourceType.NETWORK)
        self.assertEqual(utils_classname.rasd_classname_from_type(
            ResourceType.DISK), "DiskResourceAllocationSettingData")
        self.assertRaises(InvalidIdentifier,
                          utils_classname.rasd_type_from_classname,
                          "KVM_DiskPool")
        self.assertRaises(InvalidIdentifier,
                          utils_classname.rasd_classname_from_type,
                          ResourceType.UNKNOWN)


class TestPoolIds(unittest.TestCase):

    def test_recognized_prefixes(self):
        cases = {
            "ProcessorPool/0": ResourceType.PROCESSOR,
            "MemoryPool/0": ResourceType.MEMORY,
            "NetworkPool/default": ResourceType.NETWORK,
            "DiskPool/images": ResourceType.DISK,
        }
        for pool_id, res_type in cases.items():
            self.assertEqual(utils_classname.res_type_from_pool_id(pool_id),
                             res_type)

    def test_unknown_prefix(self):
        for pool_id in ("FooPool/0", "", None, "diskpool/images"):
            self.assertEqual(utils_classname.res_type_from_pool_id(pool_id),
                             ResourceType.UNKNOWN)

    def test_pool_base(self):
        self.assertEqual(utils_classname.pool_base_from_type(
            ResourceType.NETWORK), "NetworkPool")
        self.assertRaises(InvalidIdentifier,
                          utils_classname.pool_base_from_type,
                          ResourceType.UNKNOWN)


class TestDeviceIds(unittest.TestCase):

    def test_parse(self):
        self.assertEqual(utils_classname.parse_fq_devid("guest1/vda"),
                         ("guest1", "vda"))
        self.assertEqual(utils_classname.parse_fq_devid("guest1/a/b"),
                         ("guest1", "a/b"))

    def test_invalid(self):
        for devid in ("guest1", "/vda", "guest1/", "", None):
            self.assertRaises(InvalidIdentifier,
                              utils_classname.parse_fq_devid, devid)

    def test_make(self):
        devid = utils_classname.make_fq_devid("guest1",
                                              utils_classname.MEM_DEVICE_ID)
        self.assertEqual(devid, "guest1/mem")


if __name__ == '__main__':
    unittest.main()
