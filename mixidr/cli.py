'''
   mixidr command line.

   Usage:
      mixidr [fit|simulate|help] [options]

      Try 'mixidr -h' for more information.

    Purpose: fits a two-component Gaussian mixture with shared variance to a column of
             values by EM and scores every value with a local and a global IDR.
'''
import sys, os, json, argparse
import logging
import numpy  as np
import pandas as pd
from collections import OrderedDict

from ._version   import __version__
from .em         import em, DEFAULT_TOLERANCE, DEFAULT_MAX_ITERATIONS
from .errors     import InvalidInput
from .idr        import local_idr, global_idr, reproducible_component, DEFAULT_IDR_THRESHOLD
from .model      import MixtureParameters, guess_initial_params
from .multistart import multi_start, initial_param_grid, best_fit
from .simulate   import generate_data

PARAM_NAMES = ('pi', 'mu1', 'mu2', 'sigma2')


def eprint(*args, **kwargs):
    print(*args, file=sys.stderr, **kwargs)


def _params_from_args(args):
    given = [getattr(args, n) for n in PARAM_NAMES]
    if all(v is None for v in given):
        return None
    if any(v is None for v in given):
        eprint("Error: --pi, --mu1, --mu2 and --sigma2 have to be given together.")
        sys.exit(1)
    return MixtureParameters(*given)


def _setup_logging(log_path):
    logger = logging.getLogger()
    logger.setLevel(logging.DEBUG)
    fh = logging.FileHandler(log_path, 'w')
    sh = logging.StreamHandler()

    formatter = logging.Formatter('%(module)s:%(asctime)s:%(lineno)d:%(levelname)s:%(message)s')
    fh.setFormatter(formatter)
    sh.setFormatter(formatter)

    logger.addHandler(sh)
    logger.addHandler(fh)

    return logger, (sh, fh)


def _read_column(path, column, header):
    try:
        df = pd.read_table(path, sep='\t', header=0 if header else None, comment='#')
    except (pd.errors.EmptyDataError, pd.errors.ParserError) as e:
        raise InvalidInput("Cannot parse %s: %s" % (path, e))
    if not header:
        try:
            column = int(column)
        except ValueError:
            raise InvalidInput("Column %s is not an index; use --header to select columns by name." % column)
    elif column not in df.columns:
        try:
            column = df.columns[int(column)]
        except (ValueError, IndexError):
            raise InvalidInput("Column %s does not exist in %s." % (column, path))

    if column not in df.columns:
        raise InvalidInput("Column %s does not exist in %s." % (column, path))

    try:
        values = pd.to_numeric(df[column], errors='raise')
    except (TypeError, ValueError) as e:
        raise InvalidInput("Column %s is not numeric: %s" % (column, e))

    return column, values


def command_fit(args):
    if not os.path.exists(args.input):
        eprint("Error: input file %s does not exist." % args.input)
        sys.exit(1)

    if os.path.exists(args.out):
        eprint("Error: output path %s already exists." % args.out)
        sys.exit(1)

    if args.nstart < 1:
        eprint("Error: -n/--n_start needs to be 1 or higher.")
        sys.exit(1)

    if args.ncpu < 1:
        eprint("Error: -p/--ncpu needs to be 1 or higher.")
        sys.exit(1)

    if args.idr < 0.0 or args.idr > 1.0:
        eprint("Error: -t/--idr_threshold option has an out-of-range value.")
        sys.exit(1)

    init = _params_from_args(args)

    if args.suf:
        suffix = "_" + args.suf
    else:
        suffix = ""

    log_path  = os.path.join(args.out, "logs", "log_mixidr_fit" + suffix + ".txt")
    resp_path = os.path.join(args.out, "responsibilities" + suffix + ".tsv")
    json_path = os.path.join(args.out, "fit_summary" + suffix + ".json")

    os.makedirs(os.path.join(args.out, "logs"), exist_ok=True)

    ### logging conf ###
    logger, handlers = _setup_logging(log_path)
    #####################

    try:
        logger.info("Cmd: %s" % " ".join(sys.argv))

        try:
            column, values = _read_column(args.input, args.column, args.header)
            n_missing = int(values.isna().sum())
            if n_missing > 0:
                logger.warning("%d missing values in column %s were removed." % (n_missing, column))
                values = values.dropna()
            sample = values.values.astype(np.float64)
            logger.info("Input file parsing was finished. #values: %d" % len(sample))

            if init is not None:
                logger.info("Fitting from the given initial guess %s." % (init,))
                result = em(sample, init, tolerance=args.tol, max_iterations=args.max_iter)
            elif args.nstart > 1:
                starts = initial_param_grid(sample, args.nstart)
                results = multi_start(sample, starts, tolerance=args.tol, max_iterations=args.max_iter, processes=args.ncpu)
                for i, r in enumerate(results):
                    logger.info("start %d: %s -> %s, log-likelihood=%.6g" % (i, starts[i], r.termination, r.log_likelihood))
                result = best_fit(results)
            else:
                init = guess_initial_params(sample)
                logger.info("Fitting from the guessed initial guess %s." % (init,))
                result = em(sample, init, tolerance=args.tol, max_iterations=args.max_iter)
        except InvalidInput as e:
            logger.error("Invalid input: %s" % e)
            sys.exit(1)

        if result.degenerate:
            logger.warning("The fit is numerically degenerate: %s" % ", ".join(result.degeneracies))

        component = reproducible_component(result.params)
        lidr = local_idr(result, component=component)
        gidr = global_idr(lidr)

        df = pd.DataFrame(OrderedDict([
            ('value',            sample),
            ('responsibility_2', result.responsibilities),
            ('local_idr',        lidr),
            ('global_idr',       gidr),
            ('reproducible',     gidr <= args.idr),
        ]))
        df.to_csv(resp_path, sep='\t', index=False)
        logger.info("Per-value scores were written into %s" % resp_path)

        tobe_json = OrderedDict()
        tobe_json["Input"]  = os.path.abspath(args.input)
        tobe_json["Column"] = str(column)
        tobe_json["Number of values"] = int(len(sample))
        tobe_json["Parameters"] = OrderedDict((n, float(getattr(result.params, n))) for n in PARAM_NAMES)
        tobe_json["Log-likelihood"] = float(result.log_likelihood)
        tobe_json["Iterations"]     = int(result.iterations)
        tobe_json["Termination"]    = result.termination
        tobe_json["Converged"]      = bool(result.converged)
        tobe_json["Degeneracies"]   = list(result.degeneracies)
        tobe_json["Reproducible component"] = component
        tobe_json["IDR threshold"]          = args.idr
        tobe_json["Number of reproducible values"] = int(np.sum(gidr <= args.idr))

        with open(json_path, "w") as f:
            logger.info("Fit summary was written into a JSON file: %s" % json_path)
            json.dump(tobe_json, f, indent=4)
    finally:
        for h in handlers:
            logger.removeHandler(h)
            h.close()


def command_simulate(args):
    if os.path.exists(args.out):
        eprint("Error: output path %s already exists." % args.out)
        sys.exit(1)

    params = MixtureParameters(pi=args.pi, mu1=args.mu1, mu2=args.mu2, sigma2=args.sigma2)
    try:
        sample, labels = generate_data(args.n, params, random_state=args.seed)
    except InvalidInput as e:
        eprint("Error: %s" % e)
        sys.exit(1)

    df = pd.DataFrame(OrderedDict([('value', sample), ('component', labels)]))
    df.to_csv(args.out, sep='\t', index=False, header=False)


def build_parser():
    parser = argparse.ArgumentParser(
        prog='mixidr',
        description='mixidr fits a two-component Gaussian mixture by EM and computes IDR scores.',
        add_help=True,
    )
    parser.add_argument('-v', '--version', action='version', version='%(prog)s ' + __version__)
    subparsers = parser.add_subparsers()

    # fit
    parser_fit = subparsers.add_parser('fit', help='see `fit -h`')
    parser_fit.add_argument('input', help='Input table, tab separated', type=str)
    parser_fit.add_argument('-o', '--output', \
                            help='path for output directory', type=str,\
                            dest = 'out', required=True, default = None)
    parser_fit.add_argument('-c', '--column', \
                            help='column holding the values, an index or a name with --header [Default is 0].', type=str,\
                            dest = 'column', default = '0')
    parser_fit.add_argument('--header', help='the first line of the input is a header.',\
                            dest = 'header', action = 'store_true', default = False)
    parser_fit.add_argument('--pi', help='initial weight of component 1.', type=float, dest = 'pi', default = None)
    parser_fit.add_argument('--mu1', help='initial mean of component 1.', type=float, dest = 'mu1', default = None)
    parser_fit.add_argument('--mu2', help='initial mean of component 2.', type=float, dest = 'mu2', default = None)
    parser_fit.add_argument('--sigma2', help='initial shared variance.', type=float, dest = 'sigma2', default = None)
    parser_fit.add_argument('--tol', help='convergence tolerance on the log-likelihood [Default is %g].' % DEFAULT_TOLERANCE,\
                            type=float, dest = 'tol', default = DEFAULT_TOLERANCE)
    parser_fit.add_argument('--max_iter', help='maximum number of EM iterations [Default is %d].' % DEFAULT_MAX_ITERATIONS,\
                            type=int, dest = 'max_iter', default = DEFAULT_MAX_ITERATIONS)
    parser_fit.add_argument('-n', '--n_start', \
                            help='the number of starting points when no initial guess is given [Default is 1].', type=int,\
                            dest = 'nstart', default = 1)
    parser_fit.add_argument('-p', '--ncpu', help='the number of processes for multiple starts [Default is 1].', type=int, dest = 'ncpu', default = 1)
    parser_fit.add_argument('-t', '--idr_threshold', \
                            help='global IDR threshold for calling a value reproducible [Default is %g].' % DEFAULT_IDR_THRESHOLD, type=float,\
                            dest = 'idr', default = DEFAULT_IDR_THRESHOLD)
    parser_fit.add_argument('-s', '--sample_name', \
                            help='sample name is added as a suffix for each output file.', type=str,\
                            dest = 'suf', default = None)
    parser_fit.set_defaults(handler=command_fit)

    # simulate
    parser_sim = subparsers.add_parser('simulate', help='see `simulate -h`')
    parser_sim.add_argument('-o', '--output', help='path for the output table', type=str, dest = 'out', required=True)
    parser_sim.add_argument('-n', '--n_data', help='the number of values [Default is 1000].', type=int, dest = 'n', default = 1000)
    parser_sim.add_argument('--pi', help='weight of component 1 [Default is 0.3].', type=float, dest = 'pi', default = 0.3)
    parser_sim.add_argument('--mu1', help='mean of component 1 [Default is 0].', type=float, dest = 'mu1', default = 0.0)
    parser_sim.add_argument('--mu2', help='mean of component 2 [Default is 10].', type=float, dest = 'mu2', default = 10.0)
    parser_sim.add_argument('--sigma2', help='shared variance [Default is 1].', type=float, dest = 'sigma2', default = 1.0)
    parser_sim.add_argument('--seed', help='seed for the random number generator.', type=int, dest = 'seed', default = None)
    parser_sim.set_defaults(handler=command_simulate)

    # help
    parser_help = subparsers.add_parser('help', help='see `help -h`')
    parser_help.add_argument('command', help='')
    parser_help.set_defaults(handler=lambda args: parser.parse_args([args.command, '--help']))

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    if hasattr(args, 'handler'):
        args.handler(args)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
