"""Tests for the per-binary evaluator."""

from pathlib import Path

from pagealign.analysis.evaluator import NO_LOAD_SEGMENTS, BinaryResult, evaluate_binary, format_segment
from pagealign.errors import ParseError
from pagealign.extraction.segment import HeaderDump, Segment


def test_compliant_binary_passes(compliant_dump, reader_for):
    result = evaluate_binary(Path("libok.so"), reader_for(compliant_dump), 16384)
    assert result.passed
    assert result.issues == ()
    assert result.has_compat_note
    assert len(result.segments) == 2
    assert result.details[1] == "Segment 2 - Align:16384 VAddr:0x100000 Offset:0x10000 [OK]"


def test_misaligned_binary_fails_with_numbered_issues(misaligned_dump, reader_for):
    result = evaluate_binary(Path("libbad.so"), reader_for(misaligned_dump), 16384)
    assert not result.passed
    assert len(result.issues) == 3
    assert all(issue.startswith("Segment 2: ") for issue in result.issues)
    assert result.details[0].endswith("[OK]")
    assert "[FAIL: virtual address 0x4f4bc0" in result.details[1]


def test_no_load_segments_fails(reader_for):
    dump = HeaderDump(path="libempty.so", segments=(), has_compat_note=True)
    result = evaluate_binary(Path("libempty.so"), reader_for(dump), 16384)
    assert not result.passed
    assert result.issues == (NO_LOAD_SEGMENTS,)
    assert result.segments == ()


def test_parse_failure_is_recorded_not_raised():
    def failing_reader(path):
        raise ParseError(path, "bad input", returncode=3)

    result = evaluate_binary(Path("lib/arm64-v8a/libbroken.so"), failing_reader, 16384)
    assert not result.passed
    assert result.segments == ()
    assert len(result.issues) == 1
    assert "exit code 3" in result.issues[0]
    assert "lib/arm64-v8a/libbroken.so" in result.issues[0]


def test_missing_note_does_not_fail(compliant_dump, reader_for):
    dump = HeaderDump(path=compliant_dump.path, segments=compliant_dump.segments, has_compat_note=False)
    result = evaluate_binary(Path("libok.so"), reader_for(dump), 16384)
    assert result.passed
    assert not result.has_compat_note


def test_label_overrides_path(compliant_dump, reader_for):
    result = evaluate_binary(Path("/tmp/x/0000/libok.so"), reader_for(compliant_dump), label="app.apk!lib/arm64-v8a/libok.so")
    assert result.path == "app.apk!lib/arm64-v8a/libok.so"


def test_evaluation_is_idempotent(misaligned_dump, reader_for):
    reader = reader_for(misaligned_dump)
    first = evaluate_binary(Path("libbad.so"), reader, 16384)
    second = evaluate_binary(Path("libbad.so"), reader, 16384)
    assert first == second


def test_passed_is_false_without_segments():
    assert not BinaryResult(path="x.so").passed
    assert not BinaryResult(path="x.so", has_compat_note=True).passed


def test_evaluate_real_elf(make_elf):
    from pagealign.extraction.elf_reader import read_elf_headers

    path = make_elf(segments=[(4096, 0x0, 0x0), (4096, 0x1000, 0x1000)])
    result = evaluate_binary(path, read_elf_headers, 16384)
    assert not result.passed
    assert result.issues == (
        "Segment 1: alignment 4096 is below the required 16384",
        "Segment 2: alignment 4096 is below the required 16384",
    )


def test_format_segment_joins_issues():
    seg = Segment(alignment=4096, virtual_address=0x10, file_offset=0x20)
    line = format_segment(4, seg, ["a", "b"])
    assert line == "Segment 4 - Align:4096 VAddr:0x10 Offset:0x20 [FAIL: a; b]"
