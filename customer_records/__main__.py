import uvicorn

from customer_records.core_settings import get_settings


def main():
    settings = get_settings()
    uvicorn.run("customer_records.main:app", host="0.0.0.0", port=settings.PORT)


if __name__ == "__main__":
    main()
