import argparse
import io
import os
import sys

import PyPDF2

from app.services.pdf_service import OUTPUT_FILENAME, render_thank_you_pdf


def main() -> int:
    parser = argparse.ArgumentParser(description="Render the thank-you PDF for a local PNG")
    parser.add_argument("image", help="path to a PNG image")
    parser.add_argument("-o", "--output", default=OUTPUT_FILENAME)
    args = parser.parse_args()

    if not os.path.exists(args.image):
        print(f"Missing file: {args.image}")
        return 1

    pdf_bytes, failure = render_thank_you_pdf(args.image, "png")
    if failure is not None:
        print(f"Failed  {failure.message}")
        if failure.cause:
            print(f"Cause   {failure.cause}")
        return 1

    with open(args.output, "wb") as f:
        f.write(pdf_bytes)

    pages = len(PyPDF2.PdfReader(io.BytesIO(pdf_bytes)).pages)
    print(f"Done. Pages {pages}  bytes {len(pdf_bytes)}  output {args.output}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
