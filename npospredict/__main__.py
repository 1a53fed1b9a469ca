"""A commandline tool to forecast an NPoS validator election.

Loads a JSON voter list, elects the validators by sequential Phragmén with
stake equalization and prints the ranking of all candidates with their
backed stakes.
"""

import argparse
import io
import logging
import sys
import warnings
from typing import List, Optional

import npospredict.component.arithmetic
import npospredict.component.tiebreak
import npospredict.io.voterlist
import npospredict.measure
from npospredict.evaluate.rank import SequentialPhragmenRanker, \
    ValidatorInfo, DEFAULT_ITERATIONS
from npospredict.component.arithmetic import round_half_up

argparser = argparse.ArgumentParser(
    prog='npospredict',
    description=__doc__,
    formatter_class=argparse.ArgumentDefaultsHelpFormatter,
)
argparser.add_argument(
    '-i', '--input-file',
    type=argparse.FileType('r', encoding='utf8'),
    help='JSON voter list file to load voters from',
)
argparser.add_argument(
    '-I', '--use-stdin',
    action='store_true',
    help='load the voter list from standard input',
)
argparser.add_argument(
    '-n', '--count',
    type=int,
    help=(
        'number of validator seats to fill (overrides the count given in'
        ' the voter list); required if the voter list gives none'
    ),
)
argparser.add_argument(
    '-a', '--arithmetic',
    choices=sorted(npospredict.component.arithmetic.ARITHMETICS),
    default='fraction',
    help='number policy of the stake computations',
)
argparser.add_argument(
    '-t', '--tie-breaker',
    choices=sorted(npospredict.component.tiebreak.TIE_BREAKERS),
    default='input_order',
    help='rule choosing among candidates tied at the minimal score',
)
argparser.add_argument(
    '--iterations',
    type=int,
    default=DEFAULT_ITERATIONS,
    help='number of stake equalization iterations',
)
argparser.add_argument(
    '--json',
    action='store_true',
    help='print the forecast as a JSON document instead of a table',
)
argparser.add_argument(
    '-v', '--verbose',
    action='store_true',
    help='show all evaluator log messages and other info',
)
argparser.add_argument(
    '-q', '--quiet',
    action='store_true',
    help='do not show any evaluator log messages or other info',
)


def main(input_file: io.TextIOBase,
         use_stdin: bool = False,
         count: Optional[int] = None,
         arithmetic: str = 'fraction',
         tie_breaker: str = 'input_order',
         iterations: int = DEFAULT_ITERATIONS,
         json: bool = False,
         verbose: bool = False,
         quiet: bool = False,
         ) -> None:
    logging.basicConfig(
        level=(
            logging.DEBUG if verbose
            else (logging.WARNING if quiet else logging.INFO)
        ),
        format='%(levelname)-10s %(message)s'
    )
    if use_stdin:
        input_file = sys.stdin
    setup = npospredict.io.voterlist.load(input_file)
    if not setup.voters:
        warnings.warn('empty voter list: cannot forecast, terminating')
        return
    if count is None:
        count = setup.count
    if count is None:
        raise ValueError('number of seats not given by the voter list'
                         ' nor on the commandline')
    ranker = SequentialPhragmenRanker(
        iterations=iterations,
        arithmetic=arithmetic,
        tie_breaker=tie_breaker,
    )
    _, ranking = ranker.evaluate(setup.voters, count)
    if json:
        npospredict.io.voterlist.dump(sys.stdout, ranking, count=count)
    else:
        show_forecast(ranking, count, n_voters=len(setup.voters))


def show_forecast(ranking: List[ValidatorInfo],
                  count: int,
                  n_voters: int,
                  ) -> None:
    """Print the ranking as a table with a summary of the elected backing."""
    print(f'Received {n_voters} voters, {len(ranking)} candidates')
    print(f'Filling {count} seats')
    print()
    if not ranking:
        print('Nobody elected')
        return
    rank_col = [str(i) for i in range(1, len(ranking) + 1)]
    id_col = [info.validator_id for info in ranking]
    flag_col = ['elected' if info.elected else '' for info in ranking]
    stake_col = [str(round_half_up(info.backed_stake)) for info in ranking]
    widths = [
        len(max(col, key=len))
        for col in (rank_col, id_col, flag_col, stake_col)
    ]
    for rank, cand, flag, stake in zip(rank_col, id_col, flag_col, stake_col):
        print(
            rank.rjust(widths[0]), ' ',
            cand.ljust(widths[1]), ' ',
            flag.ljust(widths[2]), ' ',
            stake.rjust(widths[3]),
        )
    minimal = npospredict.measure.minimal_backing(ranking)
    if minimal is not None:
        print()
        print(f'Minimal backing: {round_half_up(minimal)}')
        print('Backing spread: '
              f'{round_half_up(npospredict.measure.backing_spread(ranking))}')


if __name__ == '__main__':
    args = argparser.parse_args()
    if not args.input_file and not args.use_stdin:
        argparser.print_usage()
    else:
        main(**vars(args))
