"""
Cancel an upload after it reaches 50%
"""
import asyncio
from fileuploader import FileUploader, Progress, UploadConfig, PartParams, TimeoutConfig


async def main():
    config = UploadConfig.create(
        "http://localhost:9999/upload",
        PartParams("file", "video.mp4", "video/mp4"),
        headers=[("X-Client", "example")],
        timeout=TimeoutConfig(total=600),
        segment_size=64 * 1024,
    )
    uploader = FileUploader(config)

    stream = uploader.upload("video.mp4")
    async for state in stream:
        print(state)
        if isinstance(state, Progress) and state.percent >= 50:
            # Stops at the next segment, closes the file and the connection
            await stream.aclose()

    print(f"Cancelled: {stream.cancelled}")


if __name__ == "__main__":
    asyncio.run(main())
