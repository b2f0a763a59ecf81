import struct
import unittest

from pst_scanner.ingest.decode import (
    TruncatedRecord,
    decode_block_entry,
    decode_header,
    decode_node_entry,
    decode_page_trailer,
    decode_root,
)
from pst_scanner.models.layouts import (
    BLOCK_ENTRY_NARROW_DTYPE,
    BLOCK_ENTRY_WIDE_DTYPE,
    HEADER_FIELDS_DTYPE,
    HEADER_SIZE,
    NODE_ENTRY_NARROW_DTYPE,
    NODE_ENTRY_WIDE_DTYPE,
    PAGE_TRAILER_DTYPE,
    ROOT_NARROW_DTYPE,
    ROOT_WIDE_DTYPE,
    EncodingVariant,
    PageType,
)


class TestLayouts(unittest.TestCase):
    def test_sizes_are_packed(self):
        self.assertEqual(HEADER_FIELDS_DTYPE.itemsize, 24)
        self.assertEqual(BLOCK_ENTRY_NARROW_DTYPE.itemsize, 12)
        self.assertEqual(BLOCK_ENTRY_WIDE_DTYPE.itemsize, 16)
        self.assertEqual(NODE_ENTRY_NARROW_DTYPE.itemsize, 24)
        self.assertEqual(NODE_ENTRY_WIDE_DTYPE.itemsize, 28)
        self.assertEqual(ROOT_NARROW_DTYPE.itemsize, 56)
        self.assertEqual(ROOT_WIDE_DTYPE.itemsize, 80)
        self.assertEqual(PAGE_TRAILER_DTYPE.itemsize, 16)

    def test_field_offsets(self):
        self.assertEqual(HEADER_FIELDS_DTYPE.fields["version"][1], 0x0A)
        self.assertEqual(ROOT_NARROW_DTYPE.fields["file_eof"][1], 4)
        self.assertEqual(ROOT_WIDE_DTYPE.fields["file_eof"][1], 4)
        self.assertEqual(ROOT_NARROW_DTYPE.fields["bbt_root"][1], 0xB4 - 0xA0)
        self.assertEqual(ROOT_WIDE_DTYPE.fields["amap_free"][1], 0xB4 - 0xA0)

    def test_variant_dispatch(self):
        self.assertIsNone(EncodingVariant.from_version(0))
        self.assertIsNone(EncodingVariant.from_version(24))
        self.assertFalse(EncodingVariant.from_version(14).is_wide)
        self.assertFalse(EncodingVariant.from_version(15).is_wide)
        self.assertTrue(EncodingVariant.from_version(23).is_wide)
        self.assertTrue(EncodingVariant.from_version(36).is_wide)
        self.assertEqual(EncodingVariant.LEGACY_NARROW.root_size, 56)
        self.assertEqual(EncodingVariant.WIDE_MODERN_ALT.root_size, 80)
        self.assertEqual(PageType(0x81), PageType.NBT)


class TestDecodeHeader(unittest.TestCase):
    def _header_bytes(self, size=HEADER_SIZE):
        buf = bytearray(size)
        struct.pack_into(
            "<IIHHHBBII", buf, 0,
            0x4E444221, 0xDEADBEEF, 0x534D, 23, 19, 1, 2, 7, 9,
        )
        return buf

    def test_fields(self):
        h = decode_header(bytes(self._header_bytes()))
        self.assertEqual(h.magic, 0x4E444221)
        self.assertEqual(h.crc_partial, 0xDEADBEEF)
        self.assertEqual(h.client_magic, 0x534D)
        self.assertEqual(h.version, 23)
        self.assertEqual(h.client_version, 19)
        self.assertEqual(h.platform_create, 1)
        self.assertEqual(h.platform_access, 2)
        self.assertEqual(h.reserved1, 7)
        self.assertEqual(h.reserved2, 9)

    def test_truncated_header(self):
        with self.assertRaises(TruncatedRecord) as cm:
            decode_header(bytes(self._header_bytes(size=HEADER_SIZE - 1)))
        self.assertEqual(cm.exception.required, HEADER_SIZE)
        self.assertEqual(cm.exception.available, HEADER_SIZE - 1)
        self.assertIsInstance(cm.exception, ValueError)

    def test_offset_and_no_mutation(self):
        buf = bytearray(16) + self._header_bytes()
        before = bytes(buf)
        h = decode_header(buf, offset=16)
        self.assertEqual(h.version, 23)
        self.assertEqual(bytes(buf), before)

    def test_negative_offset_rejected(self):
        with self.assertRaises(TruncatedRecord):
            decode_header(bytes(1000), offset=-1)


class TestDecodeRoot(unittest.TestCase):
    def test_narrow_root(self):
        buf = bytearray(56)
        struct.pack_into("<IIIII", buf, 0, 0, 4096, 0x4400, 100, 200)
        struct.pack_into("<QHH", buf, 20, 0x1234, 512, 2)
        struct.pack_into("<IQQI", buf, 32, 0x21, 0x40, 0x44, 0x122)
        root = decode_root(bytes(buf), EncodingVariant.LEGACY_NARROW)
        self.assertEqual(root.file_eof, 4096)
        self.assertEqual(root.amap_last, 0x4400)
        self.assertEqual(root.amap_free, 100)
        self.assertEqual(root.pmap_free, 200)
        self.assertEqual(root.bbt_root.bref, 0x1234)
        self.assertEqual(root.bbt_root.cb, 512)
        self.assertEqual(root.bbt_root.ref_count, 2)
        self.assertFalse(root.bbt_root.wide)
        self.assertEqual(root.nbt_root.nid, 0x21)
        self.assertEqual(root.nbt_root.bid_data, 0x40)
        self.assertEqual(root.nbt_root.bid_sub, 0x44)
        self.assertEqual(root.nbt_root.nid_parent, 0x122)

    def test_wide_root(self):
        eof = (1 << 40) + 5
        buf = bytearray(80)
        struct.pack_into("<IQQQQ", buf, 0, 0, eof, 0x10000, 300, 400)
        struct.pack_into("<QHHI", buf, 36, 0x99, 64, 1, 0)
        struct.pack_into("<QQQI", buf, 52, 0x1_0000_0021, 0x50, 0x54, 0)
        root = decode_root(bytes(buf), EncodingVariant.WIDE_MODERN)
        self.assertEqual(root.variant, EncodingVariant.WIDE_MODERN)
        self.assertEqual(root.file_eof, eof)
        self.assertEqual(root.amap_last, 0x10000)
        self.assertEqual(root.pmap_free, 400)
        self.assertEqual(root.bbt_root.bref, 0x99)
        self.assertEqual(root.nbt_root.nid, 0x1_0000_0021)
        self.assertEqual(root.nbt_root.nid_parent, 0)
        self.assertTrue(root.nbt_root.wide)

    def test_wide_root_needs_wide_length(self):
        with self.assertRaises(TruncatedRecord) as cm:
            decode_root(bytes(56), EncodingVariant.WIDE_MODERN)
        self.assertEqual(cm.exception.required, 80)
        self.assertEqual(cm.exception.available, 56)


class TestDecodeEntries(unittest.TestCase):
    def test_block_and_node_entries(self):
        b = decode_block_entry(struct.pack("<QHHI", 7, 8, 9, 0), wide=True)
        self.assertEqual((b.bref, b.cb, b.ref_count), (7, 8, 9))
        n = decode_node_entry(struct.pack("<IQQI", 1, 2, 3, 4), wide=False)
        self.assertEqual((n.nid, n.bid_data, n.bid_sub, n.nid_parent), (1, 2, 3, 4))
        with self.assertRaises(TruncatedRecord):
            decode_node_entry(struct.pack("<IQQI", 1, 2, 3, 4), wide=True)

    def test_page_trailer(self):
        t = decode_page_trailer(struct.pack("<BBHIQ", 0x80, 0x80, 0xBEEF, 0x12345678, 0x42))
        self.assertEqual(PageType(t.ptype), PageType.BBT)
        self.assertEqual(t.ptype_repeat, 0x80)
        self.assertEqual(t.signature, 0xBEEF)
        self.assertEqual(t.crc, 0x12345678)
        self.assertEqual(t.bid, 0x42)


if __name__ == "__main__":
    unittest.main()
