import io
import tempfile
import unittest
from pathlib import Path

from pst_scanner.ingest.container import ContainerFile
from pst_scanner.models.findings import FindingCollector


class TestContainerFile(unittest.TestCase):
    def test_positioned_reads(self):
        with ContainerFile.from_bytes(bytes(range(100))) as c:
            self.assertEqual(c.size, 100)
            self.assertEqual(c.read_at(10, 3), bytes([10, 11, 12]))
            self.assertEqual(c.read_at(0, 2), bytes([0, 1]))
            self.assertEqual(c.read_at(98, 10), bytes([98, 99]))
            self.assertEqual(c.read_at(200, 4), b"")
            with self.assertRaises(ValueError):
                c.read_at(-1, 4)

    def test_owned_handle_closed_on_exception(self):
        with tempfile.TemporaryDirectory() as d:
            p = Path(d) / "x.ost"
            p.write_bytes(b"\x01" * 32)
            c = ContainerFile.open(p)
            with self.assertRaises(RuntimeError):
                with c:
                    self.assertEqual(c.size, 32)
                    raise RuntimeError("stop")
            self.assertTrue(c.closed)

    def test_borrowed_handle_left_open(self):
        handle = io.BytesIO(b"abc")
        with ContainerFile(handle, 3) as c:
            self.assertEqual(c.read_at(1, 2), b"bc")
        self.assertFalse(handle.closed)


class TestFindingCollector(unittest.TestCase):
    def test_snapshot_is_immutable_and_ordered(self):
        col = FindingCollector()
        col.warning("w1")
        col.error("e1")
        col.warning("w2")
        snap = col.snapshot()
        self.assertTrue(col.has_errors)
        self.assertEqual([f.message for f in snap], ["w1", "e1", "w2"])
        col.error("e2")
        self.assertEqual(len(snap), 3)
        self.assertIsInstance(snap, tuple)


if __name__ == "__main__":
    unittest.main()
