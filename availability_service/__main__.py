import uvicorn

from availability_service import config


def main():
    uvicorn.run("availability_service.main:app", host=config.HOST, port=config.PORT)


if __name__ == "__main__":
    main()
