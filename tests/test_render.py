import asyncio

import pytest
from PIL import Image

from conftest import failed, image_bytes, ok, page_arg
from pdf_process.config import ToolConfig
from pdf_process.exceptions import (
    ImageDecodeError,
    IncorrectPasswordError,
    NotPdfFileError,
    PageCountUnknownError,
    PageOutOfBoundsError,
    PdfEncryptedError,
)
from pdf_process.render import (
    RenderArgs,
    render_all_pages,
    render_page,
    render_pages,
    render_single_page,
)
from pdf_process.types import (
    Antialias,
    Crop,
    OutputFormat,
    PageColor,
    Password,
    RenderArea,
    RenderColor,
    Resolution,
    ScaleTo,
)

CONFIG = ToolConfig()


def test_render_args_empty() -> None:
    assert RenderArgs().build_args() == []


def test_render_args_order() -> None:
    args = RenderArgs(
        resolution=Resolution.uniform(300),
        scale_to=ScaleTo.width(800),
        crop=Crop(0, 0, 100, 100),
        render_area=RenderArea.CROP_BOX,
        render_color=RenderColor.GRAYSCALE,
        page_color=PageColor.TRANSPARENT,
        antialias=Antialias.NONE,
        password=Password.owner("pw"),
    )
    assert args.build_args() == [
        "-rx", "300", "-ry", "300",
        "-scale-to-x", "800", "-scale-to-y", "-1",
        "-x", "0", "-y", "0", "-W", "100", "-H", "100",
        "-cropbox",
        "-gray",
        "-transp",
        "-anti", "none",
        "-opw", "pw",
    ]


def test_render_args_set_password_returns_copy() -> None:
    args = RenderArgs()
    updated = args.set_password(Password.user("pw"))
    assert args.password is None
    assert updated.build_args() == ["-upw", "pw"]


@pytest.mark.asyncio
async def test_render_page_command_line(fake_runner) -> None:
    runner = fake_runner("render", lambda args: ok(image_bytes("PNG")))

    args = RenderArgs(resolution=Resolution.uniform(72))
    image = await render_page(b"%PDF", 2, OutputFormat.PNG, args, config=CONFIG)

    assert isinstance(image, Image.Image)
    assert image.size == (20, 30)
    assert runner.calls == [[
        "pdftocairo", "-", "-", "-singlefile", "-f", "2", "-l", "2",
        "-rx", "72", "-ry", "72", "-png",
    ]]


@pytest.mark.asyncio
@pytest.mark.parametrize(("fmt", "pil_format"), [
    (OutputFormat.JPEG, "JPEG"),
    (OutputFormat.TIFF, "TIFF"),
])
async def test_render_page_decodes_format(fake_runner, fmt, pil_format) -> None:
    fake_runner("render", lambda args: ok(image_bytes(pil_format)))

    image = await render_page(b"%PDF", 1, fmt, config=CONFIG)

    assert image.format == pil_format


@pytest.mark.asyncio
async def test_render_page_rejects_garbage(fake_runner) -> None:
    fake_runner("render", lambda args: ok(b"definitely not an image"))

    with pytest.raises(ImageDecodeError):
        await render_page(b"%PDF", 1, OutputFormat.PNG, config=CONFIG)


@pytest.mark.asyncio
async def test_render_single_page(fake_runner, info_factory) -> None:
    runner = fake_runner("render", lambda args: ok(image_bytes("JPEG")))

    image = await render_single_page(b"%PDF", info_factory(pages=3), 3, config=CONFIG)

    assert image.format == "JPEG"
    assert page_arg(runner.calls[0][1:]) == 3
    assert runner.calls[0][-1] == "-jpeg"


@pytest.mark.asyncio
async def test_render_single_page_out_of_bounds(fake_runner, info_factory) -> None:
    runner = fake_runner("render", lambda args: ok(image_bytes()))

    with pytest.raises(PageOutOfBoundsError):
        await render_single_page(b"%PDF", info_factory(pages=2), 3, config=CONFIG)

    assert runner.calls == []


@pytest.mark.asyncio
async def test_render_pages_keeps_order(fake_runner, info_factory) -> None:
    async def respond(args):
        page = page_arg(args)
        # Later pages finish first
        await asyncio.sleep(0.01 * (5 - page))
        return ok(image_bytes("PNG", size=(page, page)))

    fake_runner("render", respond)

    images = await render_pages(
        b"%PDF", info_factory(pages=4), [4, 1, 3], OutputFormat.PNG, config=CONFIG
    )

    assert [image.size for image in images] == [(4, 4), (1, 1), (3, 3)]


@pytest.mark.asyncio
async def test_render_pages_validates_before_dispatch(fake_runner, info_factory) -> None:
    runner = fake_runner("render", lambda args: ok(image_bytes()))

    with pytest.raises(PageOutOfBoundsError) as excinfo:
        await render_pages(b"%PDF", info_factory(pages=2), [1, 5], config=CONFIG)

    assert excinfo.value.page == 5
    assert runner.calls == []


@pytest.mark.asyncio
async def test_render_pages_encrypted_without_password(fake_runner, info_factory) -> None:
    runner = fake_runner("render", lambda args: ok(image_bytes()))
    info = info_factory(encrypted="yes (print:yes copy:no change:no addNotes:no algorithm:RC4)")

    with pytest.raises(PdfEncryptedError):
        await render_pages(b"%PDF", info, [1], config=CONFIG)

    assert runner.calls == []


@pytest.mark.asyncio
async def test_render_pages_encrypted_with_password(fake_runner, info_factory) -> None:
    runner = fake_runner("render", lambda args: ok(image_bytes("JPEG")))
    info = info_factory(encrypted="yes (print:yes algorithm:RC4)")
    args = RenderArgs(password=Password.user("pw"))

    images = await render_pages(b"%PDF", info, [1, 2], OutputFormat.JPEG, args, config=CONFIG)

    assert len(images) == 2
    assert all(call[-3:] == ["-upw", "pw", "-jpeg"] for call in runner.calls)


@pytest.mark.asyncio
async def test_render_pages_incorrect_password(fake_runner, info_factory) -> None:
    fake_runner("render", lambda args: failed("Command Line Error: Incorrect password"))
    args = RenderArgs(password=Password.user("wrong"))

    with pytest.raises(IncorrectPasswordError):
        await render_pages(b"%PDF", info_factory(encrypted="yes"), [1], args=args, config=CONFIG)


@pytest.mark.asyncio
async def test_render_pages_first_failure_propagates(fake_runner, info_factory) -> None:
    async def respond(args):
        if page_arg(args) == 2:
            return failed("Syntax Warning: May not be a PDF file")
        await asyncio.sleep(10)
        return ok(image_bytes())

    fake_runner("render", respond)

    with pytest.raises(NotPdfFileError):
        await asyncio.wait_for(
            render_pages(b"junk", info_factory(pages=3), [1, 2, 3], config=CONFIG), timeout=5
        )


@pytest.mark.asyncio
async def test_render_all_pages(fake_runner, info_factory) -> None:
    runner = fake_runner("render", lambda args: ok(image_bytes("PNG")))

    images = await render_all_pages(
        b"%PDF", info_factory(pages=3), OutputFormat.PNG, config=CONFIG, max_concurrency=1
    )

    assert len(images) == 3
    assert sorted(page_arg(call[1:]) for call in runner.calls) == [1, 2, 3]


@pytest.mark.asyncio
async def test_render_all_pages_in_page_order(fake_runner, info_factory) -> None:
    async def respond(args):
        page = page_arg(args)
        # Page 1 finishes last
        await asyncio.sleep(0.02 * (4 - page))
        return ok(image_bytes("PNG", size=(page, page)))

    fake_runner("render", respond)

    images = await render_all_pages(b"%PDF", info_factory(pages=3), OutputFormat.PNG, config=CONFIG)

    assert [image.size for image in images] == [(1, 1), (2, 2), (3, 3)]


@pytest.mark.asyncio
async def test_render_all_pages_requires_page_count(fake_runner, info_factory) -> None:
    runner = fake_runner("render", lambda args: ok(image_bytes()))

    with pytest.raises(PageCountUnknownError):
        await render_all_pages(b"%PDF", info_factory(pages=None), config=CONFIG)

    assert runner.calls == []


@pytest.mark.asyncio
async def test_render_all_pages_negative_page_count(fake_runner, info_factory) -> None:
    runner = fake_runner("render", lambda args: ok(image_bytes()))

    with pytest.raises(PageCountUnknownError):
        await render_all_pages(b"%PDF", info_factory(pages=-3), config=CONFIG)

    assert runner.calls == []


@pytest.mark.asyncio
async def test_render_all_pages_empty_document(fake_runner, info_factory) -> None:
    runner = fake_runner("render", lambda args: ok(image_bytes()))

    assert await render_all_pages(b"%PDF", info_factory(pages=0), config=CONFIG) == []
    assert runner.calls == []
