"""
Upload a file with progress
"""
import asyncio
from fileuploader import FileUploader, Started, Progress, Done, Failed


async def main():
    uploader = (FileUploader.builder()
                .server_url("http://localhost:9999/upload")
                .headers(
                    "custom-header1", "custom-header-value1",
                    "custom-header2", "custom-header-value2",
                )
                .form_fields({
                    "key1": "value1",
                    "key2": "value2",
                })
                .part_params("file", "photo.jpg", "image/jpeg")
                .build())

    async with uploader.upload("photo.jpg") as events:
        async for state in events:
            if isinstance(state, Started):
                print("Upload started")
            elif isinstance(state, Progress):
                print(f"Progress: {state.percent}%")
            elif isinstance(state, Done):
                print(f"Server answered HTTP {state.status}: {state.body}")
            elif isinstance(state, Failed):
                print(f"Upload failed: {state.cause!r}")

    # Without progress events: only Started and Done/Failed
    events = await uploader.upload("photo.jpg", with_progress=False).collect()
    print(events)


if __name__ == "__main__":
    asyncio.run(main())
