from reahl.methodsorter.main import run_methodsorter_application


def run_application():
    return run_methodsorter_application(default_mode='mcp')


if __name__ == '__main__':
    raise SystemExit(run_application())
