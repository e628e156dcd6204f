from core.dispatcher import Dispatcher


def main_loop(dispatcher: Dispatcher):
    while True:
        try:
            if not dispatcher.process():
                break
        except KeyboardInterrupt:
            break
        except EOFError:
            break

    print('bye')
