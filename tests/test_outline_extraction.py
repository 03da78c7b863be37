import fitz

from pagetiles.core.outline_extraction import OutlineExtractor

from conftest import make_pdf


def test_nested_outline(tmp_path):
    path = make_pdf(
        tmp_path / "toc.pdf",
        pages=2,
        toc=[[1, "Chapter 1", 1], [2, "Section 1.1", 1], [1, "Chapter 2", 2]],
    )
    doc = fitz.open(str(path))
    try:
        outline = OutlineExtractor(doc).extract_outline()
    finally:
        doc.close()

    assert [item.title for item in outline] == ["Chapter 1", "Chapter 2"]
    assert [item.level for item in outline] == [0, 0]
    assert [item.page for item in outline] == [0, 1]

    (section,) = outline[0].children
    assert section.title == "Section 1.1"
    assert section.level == 1
    assert section.page == 0
    assert outline[1].children == []


def test_document_without_outline(sample_pdf):
    doc = fitz.open(str(sample_pdf))
    try:
        assert OutlineExtractor(doc).extract_outline() == []
    finally:
        doc.close()


def test_outline_command_without_bookmarks_keeps_worker_alive(sample_pdf):
    from pagetiles.protocol import ExtractedOutline, ExtractOutline, Loaded, LoadDocument
    from pagetiles.worker import RenderWorker

    with RenderWorker() as worker:
        worker.submit(LoadDocument(sample_pdf))
        worker.submit(ExtractOutline())
        assert isinstance(worker.get_response(10), Loaded)
        assert worker.get_response(10) == ExtractedOutline([])
        assert worker.running
