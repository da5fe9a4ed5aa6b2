from immuadmin.main import run

if __name__ == "__main__":
    run()
